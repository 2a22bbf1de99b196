"""Push freshly committed delivery records to connected recipients."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable

from anyio import from_thread

from baronda.domain.entities import DeliveryRecord

from .manager import NotificationConnectionManager, notification_manager

logger = logging.getLogger(__name__)


class DeliveryPublisher:
    """Serialize delivery records and schedule their websocket delivery.

    Delivery is best effort: recipients without an open connection are
    skipped and scheduling failures are logged, never raised, because the
    records are already durable by the time they are published.
    """

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    def dispatch(self, records: Iterable[DeliveryRecord]) -> int:
        """Schedule every record whose recipient is online; return how many."""

        scheduled = 0
        for record in records:
            if not self._manager.is_connected(record.recipient_id):
                continue
            message = {"type": "notification", "data": serialize_delivery_record(record)}
            if self._schedule(record.recipient_id, message):
                scheduled += 1
        return scheduled

    def _schedule(self, recipient_id: str, message: dict[str, Any]) -> bool:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run_sync(
                    _create_task, self._manager.send_to_recipient, recipient_id, message
                )
            except RuntimeError:
                logger.debug(
                    "No event loop available; realtime push skipped for %s", recipient_id
                )
                return False
        else:
            loop.create_task(self._manager.send_to_recipient(recipient_id, message))
        return True


def _create_task(send, recipient_id: str, message: dict[str, Any]) -> None:
    asyncio.get_running_loop().create_task(send(recipient_id, message))


def serialize_delivery_record(record: DeliveryRecord) -> dict[str, Any]:
    """Return the JSON payload pushed over the websocket for ``record``."""

    return {
        "id": record.id,
        "batch_id": record.batch_id,
        "recipient_id": record.recipient_id,
        "title": record.title,
        "message": record.message,
        "link": record.link,
        "image_url": record.image_url,
        "read": record.read,
        "created_at": record.created_at.isoformat() if record.created_at else None,
        "read_at": record.read_at.isoformat() if record.read_at else None,
    }


delivery_publisher = DeliveryPublisher(notification_manager)


def dispatch_delivery_records(records: Iterable[DeliveryRecord]) -> int:
    """Public helper that delegates to the shared publisher instance."""

    return delivery_publisher.dispatch(records)


__all__ = [
    "DeliveryPublisher",
    "delivery_publisher",
    "dispatch_delivery_records",
    "serialize_delivery_record",
]
