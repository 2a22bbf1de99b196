"""ORM models used by the application infrastructure."""

from .notification import DeliveryRecordModel, FanoutBatchModel
from .payment import PaymentModel
from .recipient import RecipientModel

__all__ = [
    "DeliveryRecordModel",
    "FanoutBatchModel",
    "PaymentModel",
    "RecipientModel",
]
