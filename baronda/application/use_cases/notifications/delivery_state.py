"""Read-state transitions and deletion of delivery records."""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from baronda.config import get_settings
from baronda.domain.entities import CallerContext, InboxScope, ReadTransition
from baronda.domain.errors import AccessDenied, BulkDeleteFailed, ReadStateConflict
from baronda.infrastructure.repositories import DeliveryRecordRepository

from .access import ensure_can_delete, ensure_can_view, ensure_owner

logger = logging.getLogger(__name__)


def mark_read(session: Session, caller: CallerContext, record_id: str) -> ReadTransition:
    """Move ``record_id`` from unread to read on behalf of its recipient.

    Repeated calls are no-ops. A record that no longer exists is reported as
    :attr:`ReadTransition.MISSING` instead of raising.
    """

    repository = DeliveryRecordRepository(session)
    record = repository.get(record_id)
    if record is None:
        return ReadTransition.MISSING
    ensure_owner(caller, record)
    if record.read:
        return ReadTransition.ALREADY_READ

    try:
        flipped = repository.mark_read(record_id)
    except ReadStateConflict:
        logger.info("Delivery record %s vanished before it could be marked read", record_id)
        return ReadTransition.MISSING
    return ReadTransition.MARKED if flipped else ReadTransition.ALREADY_READ


def mark_many_read(
    session: Session, caller: CallerContext, record_ids: Iterable[str]
) -> dict[str, ReadTransition]:
    """Apply :func:`mark_read` to each id, skipping records owned by others."""

    results: dict[str, ReadTransition] = {}
    for record_id in dict.fromkeys(record_ids):
        try:
            results[record_id] = mark_read(session, caller, record_id)
        except AccessDenied:
            logger.warning(
                "Recipient %s tried to mark record %s owned by someone else",
                caller.recipient_id,
                record_id,
            )
    return results


def delete_one(session: Session, caller: CallerContext, record_id: str) -> bool:
    """Delete ``record_id``; return ``False`` when it was already gone."""

    repository = DeliveryRecordRepository(session)
    record = repository.get(record_id)
    if record is None:
        return False
    ensure_can_delete(caller, record)
    try:
        return repository.delete(record_id)
    except SQLAlchemyError as exc:
        logger.error("Delete of delivery record %s failed: %s", record_id, exc)
        raise BulkDeleteFailed(deleted=0) from exc


def delete_many(session: Session, caller: CallerContext, record_ids: Iterable[str]) -> int:
    """Delete a selection of records in one transaction.

    Authorization is checked for every record before anything is deleted.
    Ids that do not exist are ignored.
    """

    repository = DeliveryRecordRepository(session)
    records = repository.get_many(record_ids)
    for record in records:
        ensure_can_delete(caller, record)
    try:
        return repository.delete_ids([record.id for record in records])
    except SQLAlchemyError as exc:
        logger.error("Bulk delete of %d record(s) failed: %s", len(records), exc)
        raise BulkDeleteFailed(deleted=0) from exc


def delete_all(session: Session, caller: CallerContext, scope: InboxScope) -> int:
    """Delete every record in ``scope`` chunk by chunk and return the count.

    Each chunk commits on its own. When a chunk fails, :class:`BulkDeleteFailed`
    reports how many records were removed before it; those stay deleted.
    """

    ensure_can_view(caller, scope)

    repository = DeliveryRecordRepository(session)
    chunk_size = get_settings().fanout_max_batch_size
    deleted = 0
    while True:
        ids = repository.list_ids(recipient_id=scope.recipient_id, limit=chunk_size)
        if not ids:
            break
        try:
            removed = repository.delete_ids(ids)
        except SQLAlchemyError as exc:
            logger.error(
                "Delete-all for %s stopped after %d record(s): %s",
                scope.recipient_id or "all recipients",
                deleted,
                exc,
            )
            raise BulkDeleteFailed(deleted=deleted) from exc
        deleted += removed
        if removed == 0:
            break

    logger.info(
        "%s deleted %d record(s) for %s",
        caller.recipient_id,
        deleted,
        scope.recipient_id or "all recipients",
    )
    return deleted


__all__ = ["mark_read", "mark_many_read", "delete_one", "delete_many", "delete_all"]
