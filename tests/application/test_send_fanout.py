"""Tests for writing delivery records for a logical send."""

import pytest
from sqlalchemy.exc import OperationalError

from baronda.application.use_cases.notifications import broadcast_notification, send_fanout
from baronda.config import get_settings
from baronda.domain.entities import (
    ExplicitRecipients,
    MessageTemplate,
    PeriodKey,
    RenderedMessage,
    UnpaidForPeriod,
    all_residents,
)
from baronda.domain.errors import (
    AccessDenied,
    EmptySelection,
    FanoutBatchConflict,
    FanoutWriteFailed,
    TemplateTooLong,
)
from baronda.infrastructure.repositories import DeliveryRecordRepository

TEMPLATE = MessageTemplate(title="Iuran Juli", body="Mohon segera melunasi iuran.", link="/dues")


def _all_records(session):
    return DeliveryRecordRepository(session).list_page(recipient_id=None, cursor=None, limit=1000)


def _fail_commits(monkeypatch, session, *, after: int):
    """Make every commit after the first ``after`` ones raise."""

    original = session.commit
    calls = {"count": 0}

    def commit():
        calls["count"] += 1
        if calls["count"] > after:
            raise OperationalError("INSERT", {}, Exception("disk I/O error"))
        original()

    monkeypatch.setattr(session, "commit", commit)


def test_each_recipient_receives_exactly_one_unread_record(session, directory, admin_caller):
    result = broadcast_notification(session, admin_caller, all_residents(), TEMPLATE)

    records = _all_records(session)
    assert result.count == result.created == 3
    assert result.duplicate is False
    assert sorted(record.recipient_id for record in records) == ["res-a", "res-b", "res-c"]
    assert all(record.read is False and record.read_at is None for record in records)
    assert {record.batch_id for record in records} == {result.batch_id}
    assert {record.link for record in records} == {"/dues"}
    assert len({record.created_at for record in records}) == 1


def test_unpaid_scenario_reaches_only_residents_without_payment(
    session, july_payment, treasurer_caller
):
    rule = UnpaidForPeriod(period=PeriodKey.parse("July 2024"))

    result = broadcast_notification(session, treasurer_caller, rule, TEMPLATE)

    records = _all_records(session)
    assert result.count == 2
    assert sorted(record.recipient_id for record in records) == ["res-b", "res-c"]
    assert records[0].message.startswith("Yth. ")


def test_replaying_a_batch_does_not_duplicate(session, directory, admin_caller):
    first = broadcast_notification(session, admin_caller, all_residents(), TEMPLATE, batch_id="iuran-2024-07")
    second = broadcast_notification(session, admin_caller, all_residents(), TEMPLATE, batch_id="iuran-2024-07")

    assert first.created == 3
    assert second.duplicate is True
    assert second.created == 0
    assert second.count == 3
    assert len(_all_records(session)) == 3


def test_retry_with_same_batch_only_writes_missing_recipients(session, directory, admin_caller):
    broadcast_notification(
        session, admin_caller, ExplicitRecipients.of(["res-a"]), TEMPLATE, batch_id="retry-1"
    )

    result = broadcast_notification(session, admin_caller, all_residents(), TEMPLATE, batch_id="retry-1")

    assert result.created == 2
    assert result.count == 3
    assert result.duplicate is False
    assert sorted(record.recipient_id for record in _all_records(session)) == [
        "res-a",
        "res-b",
        "res-c",
    ]
    assert DeliveryRecordRepository(session).get_batch("retry-1").recipient_count == 3


def test_reusing_a_batch_for_another_message_conflicts(session, directory, admin_caller):
    broadcast_notification(session, admin_caller, all_residents(), TEMPLATE, batch_id="same-key")
    other = MessageTemplate(title="Ronda malam", body="Jadwal ronda berubah.")

    with pytest.raises(FanoutBatchConflict):
        broadcast_notification(session, admin_caller, all_residents(), other, batch_id="same-key")


def test_large_sends_commit_in_sub_batches(session, directory, admin_caller, monkeypatch):
    monkeypatch.setenv("FANOUT_MAX_BATCH_SIZE", "2")
    get_settings.cache_clear()

    result = broadcast_notification(session, admin_caller, all_residents(), TEMPLATE)

    assert result.count == 3
    assert len(_all_records(session)) == 3


def test_failed_single_batch_writes_nothing(session, directory, admin_caller, monkeypatch):
    _fail_commits(monkeypatch, session, after=0)

    with pytest.raises(FanoutWriteFailed) as excinfo:
        broadcast_notification(session, admin_caller, all_residents(), TEMPLATE, batch_id="broken")

    monkeypatch.undo()
    assert excinfo.value.committed == 0
    assert _all_records(session) == []
    assert DeliveryRecordRepository(session).get_batch("broken") is None


def test_failed_later_sub_batch_reports_committed_records(
    session, directory, admin_caller, monkeypatch
):
    monkeypatch.setenv("FANOUT_MAX_BATCH_SIZE", "2")
    get_settings.cache_clear()
    _fail_commits(monkeypatch, session, after=1)

    with pytest.raises(FanoutWriteFailed) as excinfo:
        broadcast_notification(session, admin_caller, all_residents(), TEMPLATE, batch_id="partial")

    monkeypatch.undo()
    get_settings.cache_clear()
    assert excinfo.value.committed == 2
    assert len(_all_records(session)) == 2

    resumed = broadcast_notification(session, admin_caller, all_residents(), TEMPLATE, batch_id="partial")
    assert resumed.created == 1
    assert resumed.count == 3


def test_oversized_template_writes_nothing(session, directory, admin_caller):
    template = MessageTemplate(title="x" * 60, body="isi")

    with pytest.raises(TemplateTooLong):
        broadcast_notification(session, admin_caller, all_residents(), template)

    assert _all_records(session) == []


def test_empty_selection_writes_nothing(session, directory, admin_caller):
    with pytest.raises(EmptySelection):
        broadcast_notification(session, admin_caller, ExplicitRecipients.of(["ghost"]), TEMPLATE)

    assert _all_records(session) == []


def test_residents_cannot_send(session, directory, resident_caller):
    rendered = {"res-b": RenderedMessage(recipient_id="res-b", title="Hai", message="Halo")}

    with pytest.raises(AccessDenied):
        send_fanout(session, resident_caller("res-a"), rendered)


def test_mixed_titles_are_rejected(session, directory, admin_caller):
    rendered = {
        "res-a": RenderedMessage(recipient_id="res-a", title="Satu", message="Halo"),
        "res-b": RenderedMessage(recipient_id="res-b", title="Dua", message="Halo"),
    }

    with pytest.raises(ValueError):
        send_fanout(session, admin_caller, rendered)
