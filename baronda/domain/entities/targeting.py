"""Targeting rules describing who should receive a fan-out."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from .payment import PeriodKey
from .recipient import RECIPIENT_ROLES, ROLE_RESIDENT, STAFF_ROLES


@dataclass(frozen=True)
class ExplicitRecipients:
    """A hand-picked list of recipient identifiers."""

    ids: tuple[str, ...]

    @classmethod
    def of(cls, ids: Iterable[str]) -> "ExplicitRecipients":
        return cls(ids=tuple(ids))


@dataclass(frozen=True)
class AllOfRole:
    """Every active recipient holding one of ``roles``."""

    roles: frozenset[str]

    def __post_init__(self) -> None:
        unknown = {role for role in self.roles if role not in RECIPIENT_ROLES}
        if unknown or not self.roles:
            raise ValueError(f"Peran tidak dikenal: {sorted(unknown)}")


@dataclass(frozen=True)
class UnpaidForPeriod:
    """Residents without a recorded dues payment for ``period``."""

    period: PeriodKey


TargetingRule = Union[ExplicitRecipients, AllOfRole, UnpaidForPeriod]


def all_residents() -> AllOfRole:
    return AllOfRole(roles=frozenset({ROLE_RESIDENT}))


def all_staff() -> AllOfRole:
    return AllOfRole(roles=STAFF_ROLES)


__all__ = [
    "ExplicitRecipients",
    "AllOfRole",
    "UnpaidForPeriod",
    "TargetingRule",
    "all_residents",
    "all_staff",
]
