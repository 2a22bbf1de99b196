"""Aggregate application use cases."""

from .notifications import (
    broadcast_notification,
    compose_messages,
    count_unread,
    delete_all,
    delete_many,
    delete_one,
    list_inbox,
    mark_read,
    resolve_recipients,
    send_fanout,
)

__all__ = [
    "broadcast_notification",
    "compose_messages",
    "count_unread",
    "delete_all",
    "delete_many",
    "delete_one",
    "list_inbox",
    "mark_read",
    "resolve_recipients",
    "send_fanout",
]
