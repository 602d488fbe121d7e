"""Optimistic like toggling kept consistent across every collection that shows the post."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence
from uuid import UUID

from .collection import PostCollection
from .errors import ToggleInFlightError, ValidationError
from .gateway import Gateway
from .session import AuthSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LikeToggleResult:
    post_id: UUID
    liked: bool


class LikeToggleCoordinator:
    """Flips a like locally, asks the gateway, then reconciles or reverts.

    Local updates happen before and after the single gateway await, never
    across it, so no other coordinator can observe a half-applied toggle.
    """

    def __init__(self, gateway: Gateway) -> None:
        self.gateway = gateway
        self._pending: set[tuple[UUID, UUID]] = set()

    def is_pending(self, post_id: UUID, user_id: UUID) -> bool:
        return (post_id, user_id) in self._pending

    async def toggle_like(
        self,
        session: AuthSession,
        post_id: UUID | None,
        collections: Iterable[PostCollection] = (),
    ) -> LikeToggleResult:
        if post_id is None:
            raise ValidationError("Post id is required to like a post")

        user_id = session.user_id
        key = (post_id, user_id)
        if key in self._pending:
            raise ToggleInFlightError("Like is already being updated for this post", post_id=post_id)

        targets: Sequence[PostCollection] = [c for c in collections if c.is_live and post_id in c]
        currently_liked = targets[0].is_liked_by(post_id, user_id) if targets else False
        previous = {id(c): c.is_liked_by(post_id, user_id) for c in targets}

        self._pending.add(key)
        try:
            for collection in targets:
                collection.apply_like_delta(post_id, user_id, not currently_liked)
            logger.debug("Optimistic %s of %s by %s", "like" if not currently_liked else "unlike", post_id, user_id)

            try:
                liked = await self.gateway.toggle_like(session, post_id)
            except Exception:
                for collection in targets:
                    if collection.is_live:
                        collection.apply_like_delta(post_id, user_id, previous[id(collection)])
                logger.warning("Like toggle on %s by %s failed; reverted", post_id, user_id)
                raise

            for collection in targets:
                if collection.is_live:
                    collection.apply_like_delta(post_id, user_id, liked)
            if liked == currently_liked:
                logger.debug("Server state for %s disagreed with local cache; reconciled to liked=%s", post_id, liked)
            return LikeToggleResult(post_id=post_id, liked=liked)
        finally:
            self._pending.discard(key)


__all__ = ["LikeToggleCoordinator", "LikeToggleResult"]
