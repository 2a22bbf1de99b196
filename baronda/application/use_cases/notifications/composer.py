"""Render a message template once per recipient."""

from __future__ import annotations

from typing import Iterable

from baronda.config import Settings, get_settings
from baronda.domain.entities import (
    BODY_MAX_LENGTH,
    RECIPIENT_NAME_PLACEHOLDER,
    TITLE_MAX_LENGTH,
    MessageTemplate,
    Recipient,
    RenderedMessage,
)
from baronda.domain.errors import TemplateTooLong


def compose_messages(
    template: MessageTemplate,
    recipients: Iterable[Recipient],
    *,
    settings: Settings | None = None,
) -> dict[str, RenderedMessage]:
    """Return one personalised message per recipient, keyed by recipient id.

    The body is wrapped in a fixed envelope: a salutation carrying the
    upper-cased recipient name, the caller's body with ``{{recipientName}}``
    substituted, and the configured signature appended verbatim. The title
    is shared by every recipient.

    Every length check runs before anything is returned, so an oversized
    template never produces a partial fan-out.
    """

    settings = settings or get_settings()
    title = template.title.strip()
    if not title or not template.body.strip():
        raise ValueError("Judul dan pesan tidak boleh kosong")
    _check_length("title", title, TITLE_MAX_LENGTH)
    _check_length("body", template.body, BODY_MAX_LENGTH)

    rendered: dict[str, RenderedMessage] = {}
    for recipient in recipients:
        if recipient.id in rendered:
            continue
        name = _display_name(recipient, settings.notification_fallback_name)
        body = template.body.replace(RECIPIENT_NAME_PLACEHOLDER, name).strip()
        _check_length("body", body, BODY_MAX_LENGTH, recipient_id=recipient.id)
        salutation = settings.notification_salutation.format(name=name.upper())
        rendered[recipient.id] = RenderedMessage(
            recipient_id=recipient.id,
            title=title,
            message=f"{salutation}\n\n{body}\n\n{settings.notification_signature}",
        )
    return rendered


def _display_name(recipient: Recipient, fallback: str) -> str:
    name = (recipient.display_name or "").strip()
    return name or fallback


def _check_length(
    field: str, value: str, limit: int, *, recipient_id: str | None = None
) -> None:
    if len(value) > limit:
        raise TemplateTooLong(field, len(value), limit, recipient_id=recipient_id)


__all__ = ["compose_messages"]
