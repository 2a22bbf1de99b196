"""Persistence helpers for dues payments."""

from __future__ import annotations

from sqlalchemy import exists
from sqlalchemy.orm import Session

from baronda.domain.entities import Payment, PeriodKey
from baronda.infrastructure.models import PaymentModel
from baronda.utils import ensure_app_naive_datetime, now_in_app_timezone


class PaymentRepository:
    """Answer "has this resident paid for the period" questions."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def has_payment(self, recipient_id: str, period: PeriodKey) -> bool:
        query = self.session.query(
            exists().where(
                PaymentModel.recipient_id == recipient_id,
                PaymentModel.month == period.month,
                PaymentModel.year == period.year,
            )
        )
        return bool(query.scalar())

    def list_paid_recipient_ids(self, period: PeriodKey) -> set[str]:
        query = (
            self.session.query(PaymentModel.recipient_id)
            .filter(PaymentModel.month == period.month)
            .filter(PaymentModel.year == period.year)
            .distinct()
        )
        return {recipient_id for (recipient_id,) in query.all()}

    def create(self, payment: Payment) -> Payment:
        model = PaymentModel(
            recipient_id=payment.recipient_id,
            month=payment.month,
            year=payment.year,
            amount=payment.amount,
            paid_at=ensure_app_naive_datetime(payment.paid_at or now_in_app_timezone()),
            recorded_by=payment.recorded_by,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return Payment(
            id=model.id,
            recipient_id=model.recipient_id,
            month=model.month,
            year=model.year,
            amount=model.amount,
            paid_at=model.paid_at,
            recorded_by=model.recorded_by,
        )


__all__ = ["PaymentRepository"]
