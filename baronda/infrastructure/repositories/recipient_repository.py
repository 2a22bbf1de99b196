"""Persistence layer for the recipient directory."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.orm import Session

from baronda.domain.entities import Recipient
from baronda.infrastructure.models import RecipientModel


class RecipientRepository:
    """Read access to residents and staff, plus creation for seeding flows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, recipient_id: str) -> Recipient | None:
        model = self.session.get(RecipientModel, recipient_id)
        return self._to_entity(model) if model else None

    def list_ids_by_roles(self, roles: Iterable[str]) -> list[str]:
        wanted = sorted({role.lower() for role in roles})
        if not wanted:
            return []
        query = (
            self.session.query(RecipientModel.id)
            .filter(RecipientModel.role.in_(wanted))
            .filter(RecipientModel.is_active.is_(True))
            .order_by(RecipientModel.id)
        )
        return [recipient_id for (recipient_id,) in query.all()]

    def get_map_by_ids(
        self, recipient_ids: Iterable[str], *, include_inactive: bool = False
    ) -> dict[str, Recipient]:
        unique_ids = {str(recipient_id) for recipient_id in recipient_ids if recipient_id}
        if not unique_ids:
            return {}

        query = self.session.query(RecipientModel).filter(RecipientModel.id.in_(unique_ids))
        if not include_inactive:
            query = query.filter(RecipientModel.is_active.is_(True))
        return {model.id: self._to_entity(model) for model in query.all()}

    def create(self, recipient: Recipient) -> Recipient:
        model = RecipientModel(
            id=recipient.id,
            display_name=recipient.display_name,
            email=recipient.email,
            role=recipient.role.lower(),
            is_active=recipient.is_active,
        )
        if recipient.created_at is not None:
            model.created_at = recipient.created_at
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: RecipientModel) -> Recipient:
        return Recipient(
            id=model.id,
            display_name=model.display_name,
            email=model.email,
            role=model.role,
            is_active=bool(model.is_active),
            created_at=model.created_at,
        )


__all__ = ["RecipientRepository"]
