"""Abstract data-access gateway the coordinators talk to."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable
from uuid import UUID

from ..constants import LikeWrite
from .invalidation import InvalidationBus
from .models import Comment, ImageUpload, Post
from .session import AuthSession


class Gateway(ABC):
    """CRUD primitives against the remote store.

    Implementations raise :class:`~sabagram.interactions.errors.InteractionError`
    subclasses for every failure. A duplicate like is not a failure: it is
    reported as :attr:`LikeWrite.ALREADY_EXISTS`.
    """

    def __init__(self, invalidations: InvalidationBus | None = None) -> None:
        self.invalidations = invalidations or InvalidationBus()

    @abstractmethod
    async def create_like(self, session: AuthSession, post_id: UUID) -> LikeWrite:
        ...

    @abstractmethod
    async def delete_like(self, session: AuthSession, post_id: UUID) -> None:
        ...

    async def toggle_like(self, session: AuthSession, post_id: UUID) -> bool:
        """Create the like, or delete it when the store says it already exists.

        Returns the resulting state (``True`` when the post is now liked).
        """

        if await self.create_like(session, post_id) is LikeWrite.CREATED:
            return True
        await self.delete_like(session, post_id)
        return False

    @abstractmethod
    async def create_comment(self, session: AuthSession, post_id: UUID, content: str) -> UUID:
        ...

    @abstractmethod
    async def fetch_comments_preview(self, post_id: UUID, limit: int, *, oldest_first: bool = True) -> list[Comment]:
        ...

    @abstractmethod
    async def fetch_likes(self, post_ids: Iterable[UUID]) -> dict[UUID, set[UUID]]:
        """Return like membership for each requested post, empty sets included."""

    @abstractmethod
    async def fetch_feed(self, *, limit: int | None = None) -> list[Post]:
        ...

    @abstractmethod
    async def fetch_post(self, post_id: UUID) -> Post:
        ...

    @abstractmethod
    async def create_post(
        self,
        session: AuthSession,
        *,
        image: ImageUpload,
        caption: str,
        description: str | None = None,
    ) -> Post:
        ...

    @abstractmethod
    async def delete_post(self, session: AuthSession, post_id: UUID) -> None:
        ...

    def notify_mutated(self, paths: Iterable[str]) -> frozenset[str]:
        """Signal page-render collaborators that ``paths`` show stale data."""

        return self.invalidations.publish(paths)


__all__ = ["Gateway", "LikeWrite"]
