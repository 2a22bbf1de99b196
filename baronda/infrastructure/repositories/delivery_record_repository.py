"""Persistence helpers for fan-out batches and delivery records."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Iterable
from uuid import uuid4

from sqlalchemy import and_, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from baronda.domain.entities import (
    DIRECTION_NEXT,
    DIRECTION_PREV,
    DeliveryRecord,
    FanoutBatch,
    InboxCursor,
    RenderedMessage,
)
from baronda.domain.errors import ReadStateConflict
from baronda.infrastructure.models import DeliveryRecordModel, FanoutBatchModel
from baronda.utils import ensure_app_naive_datetime, now_in_app_naive_datetime


class DeliveryRecordRepository:
    """Batch writes, cursor queries and state changes for delivery records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # -- fan-out batches -------------------------------------------------

    def get_batch(self, batch_id: str) -> FanoutBatch | None:
        model = self.session.get(FanoutBatchModel, batch_id)
        if model is None:
            return None
        return FanoutBatch(
            id=model.id,
            sent_by=model.sent_by,
            title=model.title,
            recipient_count=model.recipient_count,
            created_at=model.created_at,
        )

    def recipient_ids_for_batch(self, batch_id: str) -> set[str]:
        query = self.session.query(DeliveryRecordModel.recipient_id).filter(
            DeliveryRecordModel.batch_id == batch_id
        )
        return {recipient_id for (recipient_id,) in query.all()}

    def create_batch(
        self,
        batch: FanoutBatch,
        messages: Sequence[RenderedMessage],
        *,
        link: str | None = None,
        image_url: str | None = None,
    ) -> list[DeliveryRecord]:
        """Insert one unread record per message (and ``batch`` when new) atomically.

        Every record receives a fresh id and the same commit timestamp. On any
        database error the transaction is rolled back and the error re-raised,
        so either all records become visible or none do.
        """

        committed_at = now_in_app_naive_datetime()
        try:
            batch_model = self.session.get(FanoutBatchModel, batch.id)
            if batch_model is None:
                batch_model = FanoutBatchModel(
                    id=batch.id,
                    sent_by=batch.sent_by,
                    title=batch.title,
                    recipient_count=0,
                    created_at=committed_at,
                )
                self.session.add(batch_model)
            batch_model.recipient_count = (batch_model.recipient_count or 0) + len(messages)

            models = [
                DeliveryRecordModel(
                    id=uuid4().hex,
                    batch_id=batch.id,
                    recipient_id=message.recipient_id,
                    title=message.title,
                    message=message.message,
                    link=link,
                    image_url=image_url,
                    read=False,
                    read_at=None,
                    created_at=committed_at,
                )
                for message in messages
            ]
            # Built before commit so the expired instances are not reloaded one by one.
            created = [self._to_entity(model) for model in models]
            self.session.add_all(models)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

        return created

    # -- reads -----------------------------------------------------------

    def get(self, record_id: str) -> DeliveryRecord | None:
        model = self.session.get(DeliveryRecordModel, record_id)
        return self._to_entity(model) if model else None

    def get_many(self, record_ids: Iterable[str]) -> list[DeliveryRecord]:
        ids = {record_id for record_id in record_ids if record_id}
        if not ids:
            return []
        query = self.session.query(DeliveryRecordModel).filter(
            DeliveryRecordModel.id.in_(ids)
        )
        return [self._to_entity(model) for model in query.all()]

    def list_page(
        self,
        *,
        recipient_id: str | None,
        cursor: InboxCursor | None,
        limit: int,
        direction: str = DIRECTION_NEXT,
    ) -> list[DeliveryRecord]:
        """Return up to ``limit`` records, newest first, relative to ``cursor``.

        ``direction="next"`` walks towards older records and ``"prev"`` towards
        newer ones; the result is always ordered by (``created_at``, ``id``)
        descending.
        """

        query = self.session.query(DeliveryRecordModel)
        if recipient_id is not None:
            query = query.filter(DeliveryRecordModel.recipient_id == recipient_id)

        created_at = DeliveryRecordModel.created_at
        record_id = DeliveryRecordModel.id
        if direction == DIRECTION_PREV:
            if cursor is not None:
                query = query.filter(
                    or_(
                        created_at > cursor.created_at,
                        and_(created_at == cursor.created_at, record_id > cursor.record_id),
                    )
                )
            models = query.order_by(created_at.asc(), record_id.asc()).limit(limit).all()
            models.reverse()
        else:
            if cursor is not None:
                query = query.filter(
                    or_(
                        created_at < cursor.created_at,
                        and_(created_at == cursor.created_at, record_id < cursor.record_id),
                    )
                )
            models = query.order_by(created_at.desc(), record_id.desc()).limit(limit).all()
        return [self._to_entity(model) for model in models]

    def list_ids(self, *, recipient_id: str | None, limit: int) -> list[str]:
        query = self.session.query(DeliveryRecordModel.id)
        if recipient_id is not None:
            query = query.filter(DeliveryRecordModel.recipient_id == recipient_id)
        query = query.order_by(DeliveryRecordModel.created_at.desc(), DeliveryRecordModel.id.desc())
        return [record_id for (record_id,) in query.limit(limit).all()]

    def count_unread(self, recipient_id: str) -> int:
        query = (
            self.session.query(func.count(DeliveryRecordModel.id))
            .filter(DeliveryRecordModel.recipient_id == recipient_id)
            .filter(DeliveryRecordModel.read.is_(False))
        )
        return int(query.scalar() or 0)

    # -- state changes ---------------------------------------------------

    def mark_read(self, record_id: str, *, read_at: datetime | None = None) -> bool:
        """Flip ``read`` to ``True``; return ``False`` when it already was.

        Raises :class:`ReadStateConflict` when the record does not exist.
        """

        stamp = ensure_app_naive_datetime(read_at) or now_in_app_naive_datetime()
        updated = (
            self.session.query(DeliveryRecordModel)
            .filter(DeliveryRecordModel.id == record_id)
            .filter(DeliveryRecordModel.read.is_(False))
            .update(
                {DeliveryRecordModel.read: True, DeliveryRecordModel.read_at: stamp},
                synchronize_session=False,
            )
        )
        self.session.commit()
        if updated:
            return True
        if self.session.get(DeliveryRecordModel, record_id) is None:
            raise ReadStateConflict(record_id)
        return False

    def delete(self, record_id: str) -> bool:
        try:
            deleted = (
                self.session.query(DeliveryRecordModel)
                .filter(DeliveryRecordModel.id == record_id)
                .delete(synchronize_session=False)
            )
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        return bool(deleted)

    def delete_ids(self, record_ids: Sequence[str]) -> int:
        """Delete ``record_ids`` in one transaction and return how many existed."""

        if not record_ids:
            return 0
        try:
            deleted = (
                self.session.query(DeliveryRecordModel)
                .filter(DeliveryRecordModel.id.in_(list(record_ids)))
                .delete(synchronize_session=False)
            )
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        return int(deleted)

    @staticmethod
    def _to_entity(model: DeliveryRecordModel) -> DeliveryRecord:
        return DeliveryRecord(
            id=model.id,
            batch_id=model.batch_id,
            recipient_id=model.recipient_id,
            title=model.title,
            message=model.message,
            created_at=model.created_at,
            read=model.read,
            read_at=model.read_at,
            link=model.link,
            image_url=model.image_url,
        )


__all__ = ["DeliveryRecordRepository"]
