"""WebSocket endpoint: change notifications for the board.

Requires a valid JWT via query param ?token=... before registering the
connection. Clients only receive; anything they send is ignored.
"""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from taskboard.infrastructure.security.jwt import verify_token

logger = logging.getLogger(__name__)

router = APIRouter()


async def _reject_websocket(websocket: WebSocket, reason: str, code: int = 1008) -> None:
    """Accept then immediately close with code/reason so client gets a proper close frame."""
    await websocket.accept()
    await websocket.close(code=code, reason=reason)


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Register an authenticated subscriber with app.state.ws_manager until it disconnects."""
    manager = websocket.app.state.ws_manager
    token = websocket.query_params.get("token")
    if not token:
        await _reject_websocket(websocket, "Missing token")
        return
    try:
        payload = verify_token(token)
    except ValueError:
        await _reject_websocket(websocket, "Invalid token")
        return
    await manager.connect(websocket, str(payload["sub"]))
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("WebSocket client %s disconnected", payload["sub"])
    finally:
        await manager.disconnect(websocket)
