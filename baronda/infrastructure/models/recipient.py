"""SQLAlchemy model for the recipient directory."""

from sqlalchemy import Boolean, Column, DateTime, String, func
from sqlalchemy.sql import expression

from baronda.infrastructure.database import Base


class RecipientModel(Base):
    """Residents and staff members that can receive notifications."""

    __tablename__ = "recipient"

    id = Column(String(64), primary_key=True)
    display_name = Column(String(120), nullable=True, index=True)
    email = Column(String(120), nullable=True, index=True)
    role = Column(String(20), nullable=False, index=True)
    is_active = Column(
        Boolean, nullable=False, default=True, server_default=expression.true()
    )
    created_at = Column(DateTime, nullable=False, server_default=func.now())


__all__ = ["RecipientModel"]
