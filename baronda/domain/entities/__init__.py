"""Domain entities exposed by the application."""

from .caller import CallerContext
from .delivery_record import DeliveryRecord, FanoutBatch, FanoutResult
from .inbox import (
    DIRECTION_NEXT,
    DIRECTION_PREV,
    InboxCursor,
    InboxPage,
    InboxScope,
    ReadTransition,
)
from .message import (
    BODY_MAX_LENGTH,
    RECIPIENT_NAME_PLACEHOLDER,
    TITLE_MAX_LENGTH,
    MessageTemplate,
    RenderedMessage,
)
from .payment import Payment, PeriodKey
from .recipient import (
    RECIPIENT_ROLES,
    ROLE_ADMIN,
    ROLE_OFFICER,
    ROLE_RESIDENT,
    ROLE_TREASURER,
    STAFF_ROLES,
    Recipient,
)
from .targeting import (
    AllOfRole,
    ExplicitRecipients,
    TargetingRule,
    UnpaidForPeriod,
    all_residents,
    all_staff,
)

__all__ = [
    "CallerContext",
    "DeliveryRecord",
    "FanoutBatch",
    "FanoutResult",
    "InboxCursor",
    "InboxPage",
    "InboxScope",
    "ReadTransition",
    "DIRECTION_NEXT",
    "DIRECTION_PREV",
    "MessageTemplate",
    "RenderedMessage",
    "TITLE_MAX_LENGTH",
    "BODY_MAX_LENGTH",
    "RECIPIENT_NAME_PLACEHOLDER",
    "Payment",
    "PeriodKey",
    "Recipient",
    "RECIPIENT_ROLES",
    "STAFF_ROLES",
    "ROLE_RESIDENT",
    "ROLE_ADMIN",
    "ROLE_TREASURER",
    "ROLE_OFFICER",
    "AllOfRole",
    "ExplicitRecipients",
    "UnpaidForPeriod",
    "TargetingRule",
    "all_residents",
    "all_staff",
]
