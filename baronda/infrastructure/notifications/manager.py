"""Connection management helpers for notification websockets."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, DefaultDict, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class NotificationConnectionManager:
    """Track open websocket connections per recipient."""

    def __init__(self) -> None:
        self._connections: DefaultDict[str, Set[WebSocket]] = defaultdict(set)

    async def connect(self, recipient_id: str, websocket: WebSocket) -> None:
        """Accept ``websocket`` and register it for ``recipient_id``."""

        await websocket.accept()
        self._connections[recipient_id].add(websocket)

    def disconnect(self, recipient_id: str, websocket: WebSocket) -> None:
        connections = self._connections.get(recipient_id)
        if connections is None:
            return
        connections.discard(websocket)
        if not connections:
            self._connections.pop(recipient_id, None)

    def is_connected(self, recipient_id: str) -> bool:
        return bool(self._connections.get(recipient_id))

    async def send_to_recipient(self, recipient_id: str, message: dict[str, Any]) -> None:
        """Send ``message`` to every open connection of ``recipient_id``."""

        for connection in list(self._connections.get(recipient_id, set())):
            try:
                await connection.send_json(message)
            except Exception:  # pragma: no cover - socket closed underneath us
                logger.debug("Dropping stale websocket for recipient %s", recipient_id)
                self.disconnect(recipient_id, connection)


notification_manager = NotificationConnectionManager()


__all__ = ["NotificationConnectionManager", "notification_manager"]
