"""Push "these pages are stale" events to connected page renderers."""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Iterable

from fastapi import WebSocket

logger = logging.getLogger(__name__)

INVALIDATION_EVENT = "paths_invalidated"


class InvalidationChannel:
    """The set of open ``/ws/feed`` sockets and the events sent to them."""

    def __init__(self) -> None:
        self._sockets: set[WebSocket] = set()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._sockets)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._sockets.add(websocket)
        logger.debug("Renderer joined; %d connected", len(self._sockets))

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._sockets.discard(websocket)

    async def publish(self, paths: Iterable[str]) -> list[str]:
        """Send one ``paths_invalidated`` event; sockets that fail are dropped."""

        stale = sorted({path for path in paths if path})
        if not stale:
            return stale
        payload = json.dumps({"type": INVALIDATION_EVENT, "paths": stale})
        async with self._lock:
            targets = list(self._sockets)
        for websocket in targets:
            try:
                await websocket.send_text(payload)
            except Exception as exc:
                logger.warning("Dropping renderer %s after failed send: %s", websocket.client, exc)
                await self.disconnect(websocket)
        return stale


invalidation_channel = InvalidationChannel()


async def invalidate_paths(*groups: Iterable[str]) -> None:
    """Tell connected page renderers which paths hold stale data."""

    paths = [path for group in groups for path in group]
    try:
        await invalidation_channel.publish(paths)
    except Exception:  # pragma: no cover - best effort logging
        logger.exception("Failed to broadcast invalidation for %s", sorted(set(paths)))


__all__ = ["INVALIDATION_EVENT", "InvalidationChannel", "invalidate_paths", "invalidation_channel"]
