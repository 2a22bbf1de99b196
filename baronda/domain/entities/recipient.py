"""Domain entity representing someone who can receive notifications."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

ROLE_RESIDENT = "resident"
ROLE_ADMIN = "admin"
ROLE_TREASURER = "treasurer"
ROLE_OFFICER = "officer"

RECIPIENT_ROLES = frozenset({ROLE_RESIDENT, ROLE_ADMIN, ROLE_TREASURER, ROLE_OFFICER})
STAFF_ROLES = frozenset({ROLE_ADMIN, ROLE_TREASURER, ROLE_OFFICER})


@dataclass
class Recipient:
    """A resident or staff member known to the recipient directory."""

    id: str
    display_name: str | None
    email: str | None
    role: str
    is_active: bool = True
    created_at: datetime | None = None

    def is_staff(self) -> bool:
        """Return ``True`` for admins, treasurers and officers."""

        return self.role.lower() in STAFF_ROLES


__all__ = [
    "Recipient",
    "ROLE_RESIDENT",
    "ROLE_ADMIN",
    "ROLE_TREASURER",
    "ROLE_OFFICER",
    "RECIPIENT_ROLES",
    "STAFF_ROLES",
]
