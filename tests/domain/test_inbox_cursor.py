"""Tests for the opaque inbox cursor and delivery record validation."""

from datetime import datetime, timezone

import pytest

from baronda.domain.entities import DeliveryRecord, InboxCursor, InboxScope
from baronda.domain.errors import InvalidCursor, MalformedDeliveryRecord


def _record(**overrides) -> DeliveryRecord:
    values = {
        "id": "abc123",
        "batch_id": "batch-1",
        "recipient_id": "res-a",
        "title": "Iuran Juli",
        "message": "Yth. ANDI,",
        "created_at": datetime(2024, 7, 1, 8, 30, 15, 123456),
    }
    values.update(overrides)
    return DeliveryRecord(**values)


def test_cursor_survives_encoding():
    cursor = InboxCursor.from_record(_record())

    token = cursor.encode()

    assert "=" not in token
    assert InboxCursor.decode(token) == cursor


def test_cursor_drops_timezone_information():
    cursor = InboxCursor(
        created_at=datetime(2024, 7, 1, 8, 0, tzinfo=timezone.utc), record_id="abc"
    )

    decoded = InboxCursor.decode(cursor.encode())

    assert decoded.created_at.tzinfo is None
    assert decoded.created_at == datetime(2024, 7, 1, 8, 0)


@pytest.mark.parametrize("token", ["not-a-cursor", "e30", "!!!", "eyJ0IjoxfQ"])
def test_malformed_cursor_is_rejected(token):
    with pytest.raises(InvalidCursor):
        InboxCursor.decode(token)


def test_scope_requires_a_recipient_id():
    assert InboxScope.all().is_global
    assert not InboxScope.for_recipient("res-a").is_global
    with pytest.raises(ValueError):
        InboxScope.for_recipient("")


@pytest.mark.parametrize(
    "overrides",
    [{"title": ""}, {"recipient_id": ""}, {"created_at": None}, {"read": "yes"}],
)
def test_delivery_record_rejects_missing_fields(overrides):
    with pytest.raises(MalformedDeliveryRecord):
        _record(**overrides)
