"""SQLAlchemy models for fan-out batches and delivery records."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.sql import expression

from baronda.infrastructure.database import Base


class FanoutBatchModel(Base):
    """One logical send. The primary key is the caller's idempotency key."""

    __tablename__ = "fanout_batch"

    id = Column(String(64), primary_key=True)
    sent_by = Column(String(64), nullable=False, index=True)
    title = Column(String(50), nullable=False)
    recipient_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(), nullable=False)


class DeliveryRecordModel(Base):
    """Per-recipient copy of a sent message."""

    __tablename__ = "delivery_record"
    __table_args__ = (
        UniqueConstraint("batch_id", "recipient_id", name="uq_delivery_batch_recipient"),
        Index("ix_delivery_recipient_order", "recipient_id", "created_at", "id"),
        Index("ix_delivery_order", "created_at", "id"),
    )

    id = Column(String(32), primary_key=True)
    batch_id = Column(
        String(64), ForeignKey("fanout_batch.id", ondelete="SET NULL"), nullable=True
    )
    recipient_id = Column(
        String(64), ForeignKey("recipient.id", ondelete="CASCADE"), nullable=False
    )
    title = Column(String(50), nullable=False)
    message = Column(Text, nullable=False)
    link = Column(String(255), nullable=True)
    image_url = Column(String(500), nullable=True)
    read = Column(Boolean, nullable=False, default=False, server_default=expression.false())
    read_at = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False)


__all__ = ["FanoutBatchModel", "DeliveryRecordModel"]
