"""Per-screen cache of posts with their like sets and comment previews."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping
from uuid import UUID

from .models import Comment, Post

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PostEntry:
    post: Post
    likes: set[UUID] = field(default_factory=set)
    comments_preview: list[Comment] = field(default_factory=list)


class PostCollection:
    """Posts shown by one screen, keyed by post id in display order.

    A feed, a profile grid and a single-post dialog each own one collection.
    Two collections may hold the same post; keeping them in step is the job of
    the coordinators, which are handed every affected collection explicitly.
    Once :meth:`close` is called the collection ignores all further writes.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: dict[UUID, PostEntry] = {}
        self._live = True

    def __repr__(self) -> str:
        state = "live" if self._live else "closed"
        return f"<PostCollection {self.name!r} {state} posts={len(self._entries)}>"

    @property
    def is_live(self) -> bool:
        return self._live

    def close(self) -> None:
        self._live = False

    def __contains__(self, post_id: object) -> bool:
        return post_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[PostEntry]:
        return iter(list(self._entries.values()))

    @property
    def post_ids(self) -> list[UUID]:
        return list(self._entries)

    def get(self, post_id: UUID) -> PostEntry | None:
        return self._entries.get(post_id)

    def load(self, posts: Iterable[Post], likes_by_post: Mapping[UUID, Iterable[UUID]] | None = None) -> None:
        """Replace the contents with a fresh load, newest post first."""

        if not self._live:
            return
        likes_by_post = likes_by_post or {}
        ordered = sorted(posts, key=lambda post: post.created_at, reverse=True)
        self._entries = {
            post.id: PostEntry(post=post, likes=set(likes_by_post.get(post.id, ()))) for post in ordered
        }

    def upsert(
        self,
        post: Post,
        likes: Iterable[UUID] | None = None,
        comments_preview: Iterable[Comment] | None = None,
        *,
        at_top: bool = False,
    ) -> None:
        """Insert ``post`` or refresh the cached copy.

        Cached likes and comments are kept unless new values are passed.
        """

        if not self._live:
            return
        entry = self._entries.get(post.id)
        if entry is None:
            entry = PostEntry(post=post)
            if at_top:
                self._entries = {post.id: entry, **self._entries}
            else:
                self._entries[post.id] = entry
        else:
            entry.post = post
        if likes is not None:
            entry.likes = set(likes)
        if comments_preview is not None:
            entry.comments_preview = list(comments_preview)

    def remove_if_absent(self, post_id: UUID) -> bool:
        """Drop the entry for a post that no longer exists. Returns whether one was held."""

        if not self._live:
            return False
        return self._entries.pop(post_id, None) is not None

    def apply_like_delta(self, post_id: UUID, user_id: UUID, liked: bool) -> bool:
        """Set ``user_id``'s membership in the post's like set.

        Idempotent: applying the same delta twice leaves the set unchanged.
        Returns whether the set changed.
        """

        if not self._live:
            return False
        entry = self._entries.get(post_id)
        if entry is None:
            return False
        if liked == (user_id in entry.likes):
            return False
        if liked:
            entry.likes.add(user_id)
        else:
            entry.likes.discard(user_id)
        logger.debug("%s: %s %s post %s", self.name, user_id, "likes" if liked else "unlikes", post_id)
        return True

    def likes_of(self, post_id: UUID) -> frozenset[UUID]:
        entry = self._entries.get(post_id)
        return frozenset(entry.likes) if entry else frozenset()

    def like_count(self, post_id: UUID) -> int:
        entry = self._entries.get(post_id)
        return len(entry.likes) if entry else 0

    def is_liked_by(self, post_id: UUID, user_id: UUID) -> bool:
        entry = self._entries.get(post_id)
        return entry is not None and user_id in entry.likes

    def comments_preview_of(self, post_id: UUID) -> list[Comment]:
        entry = self._entries.get(post_id)
        return list(entry.comments_preview) if entry else []

    def replace_comments_preview(self, post_id: UUID, comments: Iterable[Comment]) -> bool:
        if not self._live:
            return False
        entry = self._entries.get(post_id)
        if entry is None:
            return False
        entry.comments_preview = list(comments)
        return True


__all__ = ["PostCollection", "PostEntry"]
