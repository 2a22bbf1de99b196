"""Caller supplied message content and its per-recipient rendering."""

from __future__ import annotations

from dataclasses import dataclass

TITLE_MAX_LENGTH = 50
BODY_MAX_LENGTH = 1200
RECIPIENT_NAME_PLACEHOLDER = "{{recipientName}}"


@dataclass(frozen=True)
class MessageTemplate:
    """Content written once by staff before it is fanned out."""

    title: str
    body: str
    link: str | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class RenderedMessage:
    """Immutable, personalised message for a single recipient."""

    recipient_id: str
    title: str
    message: str


__all__ = [
    "MessageTemplate",
    "RenderedMessage",
    "TITLE_MAX_LENGTH",
    "BODY_MAX_LENGTH",
    "RECIPIENT_NAME_PLACEHOLDER",
]
