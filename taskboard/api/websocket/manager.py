"""WebSocket connection manager.

Holds every authenticated connection and fans change notifications out to all
of them. Use via app.state.ws_manager (set in lifespan). There is a single
shared board, so every subscriber receives every change.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks connected clients and the user each one belongs to."""

    def __init__(self) -> None:
        self._connections: dict[WebSocket, str] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, user_id: str) -> None:
        """Accept and register a new connection for an authenticated user."""
        await websocket.accept()
        async with self._lock:
            self._connections[websocket] = user_id

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._connections.pop(websocket, None)

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def broadcast(self, message: str | dict[str, Any]) -> None:
        """Send a message to all connected clients; dead connections are dropped."""
        async with self._lock:
            snapshot = list(self._connections)
        dead: list[WebSocket] = []
        for ws in snapshot:
            try:
                if isinstance(message, dict):
                    await ws.send_json(message)
                else:
                    await ws.send_text(message)
            except Exception:
                dead.append(ws)
        if dead:
            logger.debug("Dropping %d dead WebSocket connection(s)", len(dead))
            async with self._lock:
                for ws in dead:
                    self._connections.pop(ws, None)
