"""Repository implementations for infrastructure layer."""

from .delivery_record_repository import DeliveryRecordRepository
from .payment_repository import PaymentRepository
from .recipient_repository import RecipientRepository

__all__ = [
    "DeliveryRecordRepository",
    "PaymentRepository",
    "RecipientRepository",
]
