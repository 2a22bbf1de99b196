"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from baronda.domain.entities import (
    BODY_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    AllOfRole,
    ExplicitRecipients,
    PeriodKey,
    TargetingRule,
    UnpaidForPeriod,
    all_residents,
    all_staff,
)


class TargetSpec(BaseModel):
    """Who should receive a notification."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["explicit", "all_residents", "all_staff", "role", "unpaid"]
    ids: list[str] = Field(default_factory=list, description="Penerima untuk target explicit")
    roles: list[Literal["resident", "admin", "treasurer", "officer"]] = Field(
        default_factory=list, description="Peran untuk target role"
    )
    period: str | None = Field(
        default=None,
        description="Periode iuran untuk target unpaid, misalnya 'Juli 2024' atau '2024-07'",
    )

    @model_validator(mode="after")
    def _check_arguments(self) -> "TargetSpec":
        if self.kind == "explicit" and not self.ids:
            raise ValueError("ids wajib diisi untuk target explicit")
        if self.kind == "role" and not self.roles:
            raise ValueError("roles wajib diisi untuk target role")
        if self.kind == "unpaid" and not (self.period or "").strip():
            raise ValueError("period wajib diisi untuk target unpaid")
        return self

    def to_rule(self) -> TargetingRule:
        """Translate the request into a domain targeting rule.

        Raises :class:`~baronda.domain.errors.InvalidPeriodKey` for an
        unparsable ``period``.
        """

        if self.kind == "explicit":
            return ExplicitRecipients.of(self.ids)
        if self.kind == "all_residents":
            return all_residents()
        if self.kind == "all_staff":
            return all_staff()
        if self.kind == "role":
            return AllOfRole(roles=frozenset(self.roles))
        return UnpaidForPeriod(period=PeriodKey.parse(self.period or ""))


class MessageTemplateIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    body: str = Field(..., min_length=1, max_length=BODY_MAX_LENGTH)
    link: str | None = Field(default=None, max_length=255)
    image_url: str | None = Field(default=None, max_length=500)

    @field_validator("link")
    @classmethod
    def _relative_link(cls, value: str | None) -> str | None:
        if value is None or value == "":
            return None
        if not value.startswith("/") or value.startswith("//"):
            raise ValueError("link harus berupa path relatif, misalnya /dues")
        return value


class FanoutRequest(BaseModel):
    """Payload accepted by ``POST /notifications/fanout``."""

    model_config = ConfigDict(extra="forbid")

    target: TargetSpec
    template: MessageTemplateIn
    batch_id: str | None = Field(
        default=None,
        min_length=1,
        max_length=64,
        pattern=r"^[A-Za-z0-9_.:-]+$",
        description="Kunci idempotensi; kirim ulang dengan nilai yang sama saat mencoba lagi",
    )


class FanoutResponse(BaseModel):
    batch_id: str
    count: int
    created: int
    duplicate: bool


class RecipientPreviewResponse(BaseModel):
    count: int
    recipient_ids: list[str]


class DeliveryRecordRead(BaseModel):
    """Representation of a delivery record returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    batch_id: str | None = None
    recipient_id: str
    title: str
    message: str
    link: str | None = None
    image_url: str | None = None
    read: bool
    read_at: datetime | None = None
    created_at: datetime


class InboxPageRead(BaseModel):
    records: list[DeliveryRecordRead]
    next_cursor: str | None = None
    prev_cursor: str | None = None
    is_last_page: bool
    is_first_page: bool


class UnreadCountRead(BaseModel):
    recipient_id: str
    unread: int


class MarkReadResponse(BaseModel):
    id: str
    status: Literal["marked", "already_read", "missing"]


class DeleteManyRequest(BaseModel):
    """Selection of record identifiers to delete."""

    ids: list[str] = Field(..., min_length=1, description="Identifikasi pemberitahuan")

    def unique_ids(self) -> list[str]:
        """Return the identifiers without duplicates, preserving order."""

        return list(dict.fromkeys(record_id for record_id in self.ids if record_id))


class DeleteResponse(BaseModel):
    deleted: int


__all__ = [
    "TargetSpec",
    "MessageTemplateIn",
    "FanoutRequest",
    "FanoutResponse",
    "RecipientPreviewResponse",
    "DeliveryRecordRead",
    "InboxPageRead",
    "UnreadCountRead",
    "MarkReadResponse",
    "DeleteManyRequest",
    "DeleteResponse",
]
