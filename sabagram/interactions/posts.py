"""Loading, creating and deleting posts across the collections that display them."""
from __future__ import annotations

import logging
from typing import Iterable
from uuid import UUID

from ..constants import POST_CREATED_PATHS, POST_DELETED_PATHS, profile_path
from .collection import PostCollection
from .errors import NotFoundError, ValidationError
from .gateway import Gateway
from .models import ImageUpload, Post
from .session import AuthSession

logger = logging.getLogger(__name__)


class PostLifecycleCoordinator:
    def __init__(self, gateway: Gateway) -> None:
        self.gateway = gateway

    async def load_collection(self, collection: PostCollection, posts: Iterable[Post]) -> PostCollection:
        """Fill ``collection`` with ``posts`` and their like sets, fetched in one call."""

        posts = list(posts)
        likes = await self.gateway.fetch_likes([post.id for post in posts])
        collection.load(posts, likes)
        return collection

    async def load_feed(self, collection: PostCollection, *, limit: int | None = None) -> PostCollection:
        posts = await self.gateway.fetch_feed(limit=limit)
        return await self.load_collection(collection, posts)

    async def create_post(
        self,
        session: AuthSession,
        image: ImageUpload | None,
        caption: str,
        description: str | None = None,
        collections: Iterable[PostCollection] = (),
    ) -> Post:
        if image is None or not image.content:
            raise ValidationError("Please select an image")
        if not (caption or "").strip():
            raise ValidationError("Caption is required")

        post = await self.gateway.create_post(session, image=image, caption=caption.strip(), description=description)
        for collection in collections:
            if collection.is_live:
                collection.upsert(post, likes=(), comments_preview=(), at_top=True)
        logger.info("Post %s created by %s", post.id, session.user_id)
        self.gateway.notify_mutated([*POST_CREATED_PATHS, profile_path(session.user_id)])
        return post

    async def delete_post(
        self,
        session: AuthSession,
        post_id: UUID | None,
        collections: Iterable[PostCollection] = (),
    ) -> None:
        if post_id is None:
            raise ValidationError("Post id is required to delete a post")

        targets = list(collections)
        try:
            await self.gateway.delete_post(session, post_id)
        except NotFoundError:
            self._drop(post_id, targets)
            raise
        self._drop(post_id, targets)
        logger.info("Post %s deleted by %s", post_id, session.user_id)
        self.gateway.notify_mutated(POST_DELETED_PATHS)

    @staticmethod
    def _drop(post_id: UUID, collections: list[PostCollection]) -> None:
        for collection in collections:
            collection.remove_if_absent(post_id)


__all__ = ["PostLifecycleCoordinator"]
