"""Persist one delivery record per recipient for a logical send."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from baronda.config import get_settings
from baronda.domain.entities import (
    CallerContext,
    FanoutBatch,
    FanoutResult,
    MessageTemplate,
    RenderedMessage,
    TargetingRule,
)
from baronda.domain.errors import EmptySelection, FanoutBatchConflict, FanoutWriteFailed
from baronda.infrastructure.notifications import dispatch_delivery_records
from baronda.infrastructure.repositories import (
    DeliveryRecordRepository,
    RecipientRepository,
)

from .access import ensure_staff
from .composer import compose_messages
from .recipients import resolve_recipients

logger = logging.getLogger(__name__)


def send_fanout(
    session: Session,
    caller: CallerContext,
    rendered: Mapping[str, RenderedMessage],
    *,
    link: str | None = None,
    image_url: str | None = None,
    batch_id: str | None = None,
) -> FanoutResult:
    """Write ``rendered`` as unread delivery records and report the outcome.

    Records are committed in atomic sub-batches of at most
    ``FANOUT_MAX_BATCH_SIZE``. A single sub-batch is all-or-nothing; when a
    later sub-batch fails, the earlier ones stay committed and the error
    reports how many. Passing the same ``batch_id`` again resumes the send:
    recipients that already hold a record for the batch are skipped, so a
    retry never duplicates a delivery.
    """

    ensure_staff(caller)
    if not rendered:
        raise ValueError("Tidak ada pesan untuk dikirim")

    titles = {message.title for message in rendered.values()}
    if len(titles) != 1:
        raise ValueError("Semua pesan dalam satu pengiriman harus memiliki judul yang sama")
    title = titles.pop()

    batch_id = (batch_id or "").strip() or uuid4().hex
    repository = DeliveryRecordRepository(session)

    existing = repository.get_batch(batch_id)
    already_delivered: set[str] = set()
    if existing is not None:
        if existing.title != title:
            raise FanoutBatchConflict(batch_id)
        already_delivered = repository.recipient_ids_for_batch(batch_id)

    pending = [
        message
        for recipient_id, message in sorted(rendered.items())
        if recipient_id not in already_delivered
    ]
    if existing is not None and not pending:
        logger.info(
            "Fan-out batch %s replayed by %s; nothing new to send",
            batch_id,
            caller.recipient_id,
        )
        return FanoutResult(
            batch_id=batch_id,
            count=len(already_delivered),
            created=0,
            duplicate=True,
        )

    batch = FanoutBatch(
        id=batch_id,
        sent_by=caller.recipient_id,
        title=title,
        recipient_count=len(already_delivered),
    )
    chunk_size = get_settings().fanout_max_batch_size
    created = 0
    for start in range(0, len(pending), chunk_size):
        chunk = pending[start : start + chunk_size]
        try:
            records = repository.create_batch(batch, chunk, link=link, image_url=image_url)
        except SQLAlchemyError as exc:
            logger.error(
                "Fan-out batch %s failed after %d of %d records: %s",
                batch_id,
                created,
                len(pending),
                exc,
            )
            raise FanoutWriteFailed(batch_id, committed=created) from exc
        created += len(records)
        dispatch_delivery_records(records)

    logger.info(
        "Fan-out batch %s sent by %s: %d new record(s), %d total",
        batch_id,
        caller.recipient_id,
        created,
        created + len(already_delivered),
    )
    return FanoutResult(
        batch_id=batch_id,
        count=created + len(already_delivered),
        created=created,
        duplicate=False,
    )


def broadcast_notification(
    session: Session,
    caller: CallerContext,
    rule: TargetingRule,
    template: MessageTemplate,
    *,
    batch_id: str | None = None,
) -> FanoutResult:
    """Resolve ``rule``, render ``template`` per recipient and fan it out.

    Resolution and rendering errors surface before anything is written.
    """

    ensure_staff(caller)
    recipient_ids = resolve_recipients(session, rule)
    recipients = RecipientRepository(session).get_map_by_ids(recipient_ids)
    if not recipients:
        raise EmptySelection()
    rendered = compose_messages(template, recipients.values())
    return send_fanout(
        session,
        caller,
        rendered,
        link=template.link,
        image_url=template.image_url,
        batch_id=batch_id,
    )


__all__ = ["send_fanout", "broadcast_notification"]
