"""Pydantic schemas for post, like and comment resources."""
from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PostResponse(BaseModel):
    """Serialized representation of a persisted post with its author summary."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    image_url: str
    caption: str | None = None
    created_at: datetime
    username: str | None = None
    full_name: str | None = None
    avatar_url: str | None = None


class PostFeedResponse(BaseModel):
    """Envelope used when returning a collection of posts."""

    items: list[PostResponse]


class LikeWriteResponse(BaseModel):
    """Result of creating or deleting a single like row."""

    post_id: UUID
    user_id: UUID
    outcome: Literal["created", "already_exists", "deleted"]


class LikeToggleResponse(BaseModel):
    post_id: UUID
    liked: bool


class LikesByPostResponse(BaseModel):
    """Like membership keyed by post id; posts without likes map to an empty list."""

    likes: dict[UUID, list[UUID]]


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2200)


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    post_id: UUID
    user_id: UUID
    content: str
    created_at: datetime
    username: str | None = None
    avatar_url: str | None = None


class CommentListResponse(BaseModel):
    items: list[CommentResponse]


__all__ = [
    "PostResponse",
    "PostFeedResponse",
    "LikeWriteResponse",
    "LikeToggleResponse",
    "LikesByPostResponse",
    "CommentCreate",
    "CommentResponse",
    "CommentListResponse",
]
