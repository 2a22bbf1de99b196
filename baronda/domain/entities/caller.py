"""Explicit identity of whoever triggers a use case."""

from __future__ import annotations

from dataclasses import dataclass

from .recipient import STAFF_ROLES, Recipient


@dataclass(frozen=True)
class CallerContext:
    """The authenticated recipient on whose behalf an operation runs."""

    recipient_id: str
    role: str

    @classmethod
    def from_recipient(cls, recipient: Recipient) -> "CallerContext":
        return cls(recipient_id=recipient.id, role=recipient.role.lower())

    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    def owns(self, recipient_id: str) -> bool:
        return self.recipient_id == recipient_id


__all__ = ["CallerContext"]
