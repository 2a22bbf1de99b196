"""Realtime notification helpers for the infrastructure layer."""

from .manager import NotificationConnectionManager, notification_manager
from .publisher import (
    DeliveryPublisher,
    delivery_publisher,
    dispatch_delivery_records,
    serialize_delivery_record,
)

__all__ = [
    "NotificationConnectionManager",
    "notification_manager",
    "DeliveryPublisher",
    "delivery_publisher",
    "dispatch_delivery_records",
    "serialize_delivery_record",
]
