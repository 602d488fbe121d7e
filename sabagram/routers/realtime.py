"""WebSocket endpoint that pushes page invalidation events."""
from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..services.realtime import invalidation_channel

router = APIRouter()
logger = logging.getLogger(__name__)


@router.websocket("/ws/feed")
async def feed_updates(websocket: WebSocket) -> None:
    """Maintain a long-lived connection that receives ``paths_invalidated`` events."""

    await invalidation_channel.connect(websocket)
    logger.info("Feed socket connected from %s", websocket.client)
    try:
        while True:
            try:
                raw = await websocket.receive_text()
            except WebSocketDisconnect:
                break

            try:
                payload = json.loads(raw)
            except json.JSONDecodeError:
                payload = {"type": raw}

            message_type = str(payload.get("type") or "").lower() if isinstance(payload, dict) else ""
            if message_type == "ping":
                await websocket.send_text(json.dumps({"type": "pong"}))
            elif message_type == "hello":
                await websocket.send_text(json.dumps({"type": "ready"}))
    finally:
        await invalidation_channel.disconnect(websocket)
        logger.info("Feed socket disconnected from %s", websocket.client)


__all__ = ["router"]
