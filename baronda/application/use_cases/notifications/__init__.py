"""Notification fan-out, inbox and delivery-state use cases."""

from .composer import compose_messages
from .delivery_state import delete_all, delete_many, delete_one, mark_many_read, mark_read
from .fanout import broadcast_notification, send_fanout
from .inbox import count_unread, list_inbox
from .recipients import resolve_recipients

__all__ = [
    "resolve_recipients",
    "compose_messages",
    "send_fanout",
    "broadcast_notification",
    "list_inbox",
    "count_unread",
    "mark_read",
    "mark_many_read",
    "delete_one",
    "delete_many",
    "delete_all",
]
