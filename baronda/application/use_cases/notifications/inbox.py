"""Cursor paginated views over delivery records."""

from __future__ import annotations

from sqlalchemy.orm import Session

from baronda.config import get_settings
from baronda.domain.entities import (
    DIRECTION_NEXT,
    DIRECTION_PREV,
    CallerContext,
    InboxCursor,
    InboxPage,
    InboxScope,
)
from baronda.infrastructure.repositories import DeliveryRecordRepository

from .access import ensure_can_view


def list_inbox(
    session: Session,
    caller: CallerContext,
    scope: InboxScope,
    *,
    cursor: str | None = None,
    page_size: int | None = None,
    direction: str = DIRECTION_NEXT,
) -> InboxPage:
    """Return one newest-first page of ``scope``.

    ``cursor`` is the opaque token returned as ``next_cursor`` (with
    ``direction="next"``) or ``prev_cursor`` (with ``direction="prev"``) by a
    previous page. Records inserted while paging may be skipped or repeated.
    """

    ensure_can_view(caller, scope)
    if direction not in (DIRECTION_NEXT, DIRECTION_PREV):
        raise ValueError(f"Arah halaman tidak dikenal: {direction}")

    settings = get_settings()
    size = page_size or settings.inbox_page_size
    if size < 1:
        raise ValueError("Ukuran halaman harus positif")
    size = min(size, settings.inbox_max_page_size)

    boundary = InboxCursor.decode(cursor) if cursor else None
    # One extra row tells whether another page exists beyond this one.
    records = DeliveryRecordRepository(session).list_page(
        recipient_id=scope.recipient_id,
        cursor=boundary,
        limit=size + 1,
        direction=direction,
    )
    has_more = len(records) > size
    if direction == DIRECTION_PREV:
        records = records[-size:]
        is_first_page = not has_more
        # Without a cursor a backward walk starts at the oldest record.
        is_last_page = boundary is None
    else:
        records = records[:size]
        is_first_page = boundary is None
        is_last_page = not has_more

    next_cursor = None
    prev_cursor = None
    if records:
        if not is_last_page:
            next_cursor = InboxCursor.from_record(records[-1]).encode()
        if not is_first_page:
            prev_cursor = InboxCursor.from_record(records[0]).encode()

    return InboxPage(
        records=tuple(records),
        next_cursor=next_cursor,
        prev_cursor=prev_cursor,
        is_last_page=is_last_page,
        is_first_page=is_first_page,
    )


def count_unread(session: Session, caller: CallerContext, recipient_id: str) -> int:
    """Return how many unread records ``recipient_id`` holds."""

    ensure_can_view(caller, InboxScope.for_recipient(recipient_id))
    return DeliveryRecordRepository(session).count_unread(recipient_id)


__all__ = ["list_inbox", "count_unread"]
