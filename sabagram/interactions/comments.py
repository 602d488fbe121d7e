"""Comment submission followed by an authoritative preview refresh."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable
from uuid import UUID

from .collection import PostCollection
from .errors import ValidationError
from .gateway import Gateway
from .models import Comment
from .session import AuthSession

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_LIMIT = 2


@dataclass(slots=True)
class CommentDraft:
    """Text currently typed into a comment box."""

    text: str = ""

    def clear(self) -> str:
        text, self.text = self.text, ""
        return text


class CommentAppendCoordinator:
    """Submits comments; previews only ever show what the store returned."""

    def __init__(self, gateway: Gateway, *, preview_limit: int = DEFAULT_PREVIEW_LIMIT) -> None:
        self.gateway = gateway
        self.preview_limit = preview_limit

    async def add_comment(
        self,
        session: AuthSession,
        post_id: UUID | None,
        content: str | CommentDraft,
        collections: Iterable[PostCollection] = (),
    ) -> list[Comment]:
        """Post a comment and return the refreshed preview.

        When ``content`` is a :class:`CommentDraft` it is cleared while the
        request runs and its text is put back if the comment is rejected.
        """

        draft = content if isinstance(content, CommentDraft) else None
        raw = draft.text if draft is not None else content
        text = (raw or "").strip()
        if post_id is None:
            raise ValidationError("Post id is required to comment")
        if not text:
            raise ValidationError("Comment cannot be empty", post_id=post_id)

        targets = list(collections)
        if draft is not None:
            draft.clear()
        try:
            await self.gateway.create_comment(session, post_id, text)
        except Exception:
            if draft is not None:
                draft.text = raw
            logger.warning("Comment on %s by %s was not saved", post_id, session.user_id)
            raise

        return await self.refresh_preview(post_id, targets)

    async def refresh_preview(self, post_id: UUID, collections: Iterable[PostCollection] = ()) -> list[Comment]:
        preview = await self.gateway.fetch_comments_preview(post_id, self.preview_limit, oldest_first=True)
        preview = preview[: self.preview_limit]
        for collection in collections:
            if collection.is_live:
                collection.replace_comments_preview(post_id, preview)
        return preview


__all__ = ["CommentAppendCoordinator", "CommentDraft", "DEFAULT_PREVIEW_LIMIT"]
