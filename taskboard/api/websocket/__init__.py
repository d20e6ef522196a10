"""WebSocket connection manager used for change notifications."""

from taskboard.api.websocket.manager import ConnectionManager

__all__ = ["ConnectionManager"]
