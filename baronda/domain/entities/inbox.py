"""Value objects used to browse delivery records."""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Sequence

from baronda.domain.errors import InvalidCursor

from .delivery_record import DeliveryRecord

DIRECTION_NEXT = "next"
DIRECTION_PREV = "prev"


@dataclass(frozen=True)
class InboxScope:
    """Either a single recipient's inbox or every record (staff audit view)."""

    recipient_id: str | None = None

    @classmethod
    def for_recipient(cls, recipient_id: str) -> "InboxScope":
        if not recipient_id:
            raise ValueError("recipient_id is required for a recipient scope")
        return cls(recipient_id=recipient_id)

    @classmethod
    def all(cls) -> "InboxScope":
        return cls(recipient_id=None)

    @property
    def is_global(self) -> bool:
        return self.recipient_id is None


@dataclass(frozen=True)
class InboxCursor:
    """Resume point made of the boundary record's ordering key."""

    created_at: datetime
    record_id: str

    @classmethod
    def from_record(cls, record: DeliveryRecord) -> "InboxCursor":
        return cls(created_at=record.created_at, record_id=record.id)

    def encode(self) -> str:
        raw = json.dumps(
            {"t": self.created_at.isoformat(), "i": self.record_id},
            separators=(",", ":"),
        ).encode()
        return base64.urlsafe_b64encode(raw).decode().rstrip("=")

    @classmethod
    def decode(cls, token: str) -> "InboxCursor":
        padded = token + "=" * (-len(token) % 4)
        try:
            data = json.loads(base64.urlsafe_b64decode(padded.encode()))
            created_at = datetime.fromisoformat(data["t"])
            record_id = data["i"]
        except (binascii.Error, ValueError, KeyError, TypeError) as exc:
            raise InvalidCursor() from exc
        if not isinstance(record_id, str) or not record_id:
            raise InvalidCursor()
        return cls(created_at=created_at.replace(tzinfo=None), record_id=record_id)


@dataclass(frozen=True)
class InboxPage:
    """A newest-first slice of delivery records."""

    records: Sequence[DeliveryRecord] = field(default_factory=tuple)
    next_cursor: str | None = None
    prev_cursor: str | None = None
    is_last_page: bool = True
    is_first_page: bool = True


class ReadTransition(str, Enum):
    """Result of asking to mark a record as read."""

    MARKED = "marked"
    ALREADY_READ = "already_read"
    MISSING = "missing"


__all__ = [
    "InboxScope",
    "InboxCursor",
    "InboxPage",
    "ReadTransition",
    "DIRECTION_NEXT",
    "DIRECTION_PREV",
]
