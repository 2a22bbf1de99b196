"""Expand targeting rules into concrete recipient sets."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from baronda.domain.entities import (
    ROLE_RESIDENT,
    AllOfRole,
    ExplicitRecipients,
    TargetingRule,
    UnpaidForPeriod,
)
from baronda.domain.errors import EmptySelection
from baronda.infrastructure.repositories import PaymentRepository, RecipientRepository

logger = logging.getLogger(__name__)


def resolve_recipients(session: Session, rule: TargetingRule) -> frozenset[str]:
    """Return the deduplicated recipient ids selected by ``rule``.

    Raises :class:`EmptySelection` when nobody matches; callers must surface
    that as a warning rather than report a successful send.
    """

    if isinstance(rule, ExplicitRecipients):
        resolved = _resolve_explicit(session, rule)
    elif isinstance(rule, AllOfRole):
        resolved = frozenset(RecipientRepository(session).list_ids_by_roles(rule.roles))
    elif isinstance(rule, UnpaidForPeriod):
        resolved = _resolve_unpaid(session, rule)
    else:
        raise TypeError(f"Unsupported targeting rule: {type(rule).__name__}")

    if not resolved:
        raise EmptySelection()
    return resolved


def _resolve_explicit(session: Session, rule: ExplicitRecipients) -> frozenset[str]:
    requested = {
        recipient_id.strip()
        for recipient_id in rule.ids
        if recipient_id and recipient_id.strip()
    }
    if not requested:
        return frozenset()

    known = RecipientRepository(session).get_map_by_ids(requested)
    unknown = requested - known.keys()
    if unknown:
        logger.warning(
            "Ignoring %d unknown or inactive recipient id(s): %s",
            len(unknown),
            ", ".join(sorted(unknown)),
        )
    return frozenset(known)


def _resolve_unpaid(session: Session, rule: UnpaidForPeriod) -> frozenset[str]:
    # No payment row for the period counts as unpaid, including rows not yet synced.
    residents = RecipientRepository(session).list_ids_by_roles([ROLE_RESIDENT])
    paid = PaymentRepository(session).list_paid_recipient_ids(rule.period)
    unpaid = frozenset(resident for resident in residents if resident not in paid)
    logger.info(
        "%d of %d resident(s) have not paid dues for %s",
        len(unpaid),
        len(residents),
        rule.period.label,
    )
    return unpaid


__all__ = ["resolve_recipients"]
