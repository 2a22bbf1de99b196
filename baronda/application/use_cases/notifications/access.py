"""Authorization checks shared by the notification use cases."""

from __future__ import annotations

from baronda.domain.entities import CallerContext, DeliveryRecord, InboxScope
from baronda.domain.errors import AccessDenied


def ensure_staff(caller: CallerContext) -> None:
    if not caller.is_staff():
        raise AccessDenied("Hanya pengurus yang dapat mengirim pemberitahuan")


def ensure_can_view(caller: CallerContext, scope: InboxScope) -> None:
    """Recipients see their own inbox; staff see any inbox and the global view."""

    if caller.is_staff():
        return
    if scope.is_global or not caller.owns(scope.recipient_id):
        raise AccessDenied()


def ensure_can_delete(caller: CallerContext, record: DeliveryRecord) -> None:
    if caller.is_staff() or caller.owns(record.recipient_id):
        return
    raise AccessDenied()


def ensure_owner(caller: CallerContext, record: DeliveryRecord) -> None:
    """Only the recipient a record was delivered to may change its read state."""

    if not caller.owns(record.recipient_id):
        raise AccessDenied()


__all__ = ["ensure_staff", "ensure_can_view", "ensure_can_delete", "ensure_owner"]
