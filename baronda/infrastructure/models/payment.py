"""SQLAlchemy model for dues payments."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String

from baronda.infrastructure.database import Base
from baronda.utils import now_in_app_naive_datetime


class PaymentModel(Base):
    """A monthly dues payment recorded for a resident."""

    __tablename__ = "payment"
    __table_args__ = (Index("ix_payment_period", "year", "month"),)

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(
        String(64), ForeignKey("recipient.id", ondelete="CASCADE"), nullable=False, index=True
    )
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    amount = Column(Integer, nullable=False)
    paid_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    recorded_by = Column(String(64), nullable=True)


__all__ = ["PaymentModel"]
