"""Local fan-out of "these pages are stale" signals to page-render collaborators."""
from __future__ import annotations

import logging
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

InvalidationListener = Callable[[frozenset[str]], None]


class InvalidationBus:
    """Delivers invalidated path sets to every subscribed listener."""

    def __init__(self) -> None:
        self._listeners: list[InvalidationListener] = []

    def subscribe(self, listener: InvalidationListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that unsubscribes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def publish(self, paths: Iterable[str]) -> frozenset[str]:
        normalized = frozenset(path for path in paths if path)
        if not normalized:
            return normalized
        for listener in list(self._listeners):
            try:
                listener(normalized)
            except Exception:
                logger.exception("Invalidation listener failed for %s", sorted(normalized))
        return normalized


__all__ = ["InvalidationBus", "InvalidationListener"]
