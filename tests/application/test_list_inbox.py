"""Tests for the cursor paginated inbox reader."""

import pytest

from baronda.application.use_cases.notifications import count_unread, list_inbox, send_fanout
from baronda.config import get_settings
from baronda.domain.entities import InboxScope, RenderedMessage
from baronda.domain.errors import AccessDenied, InvalidCursor


def _deliver(session, caller, recipient_id, count):
    for index in range(count):
        rendered = {
            recipient_id: RenderedMessage(
                recipient_id=recipient_id, title=f"Info {index}", message=f"Pesan {index}"
            )
        }
        send_fanout(session, caller, rendered)


def _ordering_key(record):
    return (record.created_at, record.id)


def test_forward_pages_cover_every_record_once(session, directory, admin_caller, resident_caller):
    _deliver(session, admin_caller, "res-a", 25)
    caller = resident_caller("res-a")
    scope = InboxScope.for_recipient("res-a")

    seen = []
    cursor = None
    pages = []
    while True:
        page = list_inbox(session, caller, scope, cursor=cursor, page_size=10)
        pages.append(page)
        seen.extend(page.records)
        if page.is_last_page:
            break
        cursor = page.next_cursor

    assert [len(page.records) for page in pages] == [10, 10, 5]
    assert pages[0].is_first_page and pages[0].prev_cursor is None
    assert not pages[1].is_first_page and pages[1].prev_cursor is not None
    assert pages[-1].next_cursor is None
    assert len({record.id for record in seen}) == 25
    keys = [_ordering_key(record) for record in seen]
    assert keys == sorted(keys, reverse=True)


def test_exact_multiple_has_no_empty_trailing_page(session, directory, admin_caller):
    _deliver(session, admin_caller, "res-b", 20)
    scope = InboxScope.for_recipient("res-b")

    first = list_inbox(session, admin_caller, scope, page_size=10)
    second = list_inbox(session, admin_caller, scope, cursor=first.next_cursor, page_size=10)

    assert not first.is_last_page
    assert second.is_last_page
    assert len(second.records) == 10
    assert second.next_cursor is None


def test_prev_cursor_returns_the_previous_page(session, directory, admin_caller):
    _deliver(session, admin_caller, "res-a", 25)
    scope = InboxScope.for_recipient("res-a")

    first = list_inbox(session, admin_caller, scope, page_size=10)
    second = list_inbox(session, admin_caller, scope, cursor=first.next_cursor, page_size=10)
    back = list_inbox(
        session, admin_caller, scope, cursor=second.prev_cursor, page_size=10, direction="prev"
    )

    assert [record.id for record in back.records] == [record.id for record in first.records]
    assert back.is_first_page
    assert back.prev_cursor is None
    assert back.next_cursor == first.next_cursor


def test_recipient_scope_excludes_other_inboxes(session, directory, admin_caller, resident_caller):
    _deliver(session, admin_caller, "res-a", 2)
    _deliver(session, admin_caller, "res-b", 3)

    page = list_inbox(session, resident_caller("res-b"), InboxScope.for_recipient("res-b"))

    assert len(page.records) == 3
    assert {record.recipient_id for record in page.records} == {"res-b"}


def test_staff_can_read_the_global_view(session, directory, admin_caller):
    _deliver(session, admin_caller, "res-a", 2)
    _deliver(session, admin_caller, "res-c", 1)

    page = list_inbox(session, admin_caller, InboxScope.all())

    assert len(page.records) == 3
    assert page.is_first_page and page.is_last_page


def test_residents_cannot_read_other_inboxes(session, directory, resident_caller):
    caller = resident_caller("res-a")

    with pytest.raises(AccessDenied):
        list_inbox(session, caller, InboxScope.for_recipient("res-b"))
    with pytest.raises(AccessDenied):
        list_inbox(session, caller, InboxScope.all())


def test_malformed_cursor_is_rejected(session, directory, admin_caller):
    with pytest.raises(InvalidCursor):
        list_inbox(session, admin_caller, InboxScope.all(), cursor="bogus")


def test_page_size_is_capped(session, directory, admin_caller, monkeypatch):
    monkeypatch.setenv("INBOX_PAGE_SIZE", "2")
    monkeypatch.setenv("INBOX_MAX_PAGE_SIZE", "3")
    get_settings.cache_clear()
    _deliver(session, admin_caller, "res-a", 5)

    default_page = list_inbox(session, admin_caller, InboxScope.all())
    capped_page = list_inbox(session, admin_caller, InboxScope.all(), page_size=50)

    assert len(default_page.records) == 2
    assert len(capped_page.records) == 3


def test_unread_count_tracks_the_recipient(session, directory, admin_caller, resident_caller):
    _deliver(session, admin_caller, "res-a", 4)
    _deliver(session, admin_caller, "res-b", 1)

    assert count_unread(session, resident_caller("res-a"), "res-a") == 4
    assert count_unread(session, admin_caller, "res-b") == 1
    with pytest.raises(AccessDenied):
        count_unread(session, resident_caller("res-b"), "res-a")


def test_prev_without_cursor_starts_at_the_oldest_page(session, directory, admin_caller):
    _deliver(session, admin_caller, "res-a", 3)
    scope = InboxScope.for_recipient("res-a")

    oldest = list_inbox(session, admin_caller, scope, page_size=2, direction="prev")
    newest = list_inbox(session, admin_caller, scope, page_size=3)

    assert [record.id for record in oldest.records] == [record.id for record in newest.records[1:]]
    assert oldest.is_last_page
    assert oldest.next_cursor is None
    assert not oldest.is_first_page
    assert oldest.prev_cursor is not None

    newer = list_inbox(
        session, admin_caller, scope, cursor=oldest.prev_cursor, page_size=2, direction="prev"
    )
    assert [record.id for record in newer.records] == [newest.records[0].id]
    assert newer.is_first_page
