"""Domain entities for persisted per-recipient notifications."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from baronda.domain.errors import MalformedDeliveryRecord


@dataclass
class DeliveryRecord:
    """A message delivered to one recipient, carrying its own read state."""

    id: str
    batch_id: str | None
    recipient_id: str
    title: str
    message: str
    created_at: datetime
    read: bool = False
    read_at: datetime | None = None
    link: str | None = None
    image_url: str | None = None

    def __post_init__(self) -> None:
        missing = [
            name
            for name in ("id", "recipient_id", "title", "message")
            if not getattr(self, name)
        ]
        if self.created_at is None:
            missing.append("created_at")
        if missing:
            raise MalformedDeliveryRecord(
                f"Delivery record {self.id or '?'} is missing {', '.join(missing)}"
            )
        if not isinstance(self.read, bool):
            raise MalformedDeliveryRecord(
                f"Delivery record {self.id} has a non boolean read flag"
            )


@dataclass
class FanoutBatch:
    """One logical send; its id doubles as the idempotency key."""

    id: str
    sent_by: str
    title: str
    recipient_count: int
    created_at: datetime | None = None


@dataclass(frozen=True)
class FanoutResult:
    """Outcome of :func:`send_fanout`.

    ``count`` is the number of records that exist for the batch after the
    call, ``created`` how many this call wrote. A replayed batch reports
    ``duplicate=True`` and ``created=0``.
    """

    batch_id: str
    count: int
    created: int
    duplicate: bool = False


__all__ = ["DeliveryRecord", "FanoutBatch", "FanoutResult"]
