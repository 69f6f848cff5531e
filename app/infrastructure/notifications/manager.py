"""Connection management helpers for notification websockets."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Set

from anyio import from_thread
from fastapi import WebSocket

logger = logging.getLogger(__name__)


class NotificationConnectionManager:
    """Manage the websocket connections of open notification panels."""

    def __init__(self) -> None:
        self._connections: Set[WebSocket] = set()

    async def connect(self, websocket: WebSocket) -> None:
        """Accept the websocket connection and register it."""

        await websocket.accept()
        self._connections.add(websocket)

    def disconnect(self, websocket: WebSocket) -> None:
        """Remove ``websocket`` from the pool."""

        self._connections.discard(websocket)

    async def broadcast(self, message: dict[str, Any]) -> None:
        """Send ``message`` to every active connection."""

        for connection in list(self._connections):
            try:
                await connection.send_json(message)
            except Exception:  # pragma: no cover - socket closed underneath us
                self.disconnect(connection)

    def schedule_broadcast(self, message: dict[str, Any]) -> None:
        """Deliver ``message`` from synchronous code without blocking on sockets.

        Inside the event loop the send becomes a task; from a worker thread it
        is handed back to the loop through ``anyio``. Outside both contexts
        there is nobody listening and the message is dropped.
        """

        if not self._connections:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(self.broadcast, message)
            except RuntimeError:
                logger.debug("No event loop available; dropping %s message", message.get("type"))
        else:
            loop.create_task(self.broadcast(message))


__all__ = ["NotificationConnectionManager"]
