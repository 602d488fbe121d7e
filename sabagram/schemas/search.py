"""Schemas for the combined profile/post search."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel


class ProfileSearchResult(BaseModel):
    id: UUID
    username: str
    full_name: str | None = None
    avatar_url: str | None = None


class PostSearchResult(BaseModel):
    id: UUID
    caption: str | None = None
    image_url: str
    username: str | None = None


class SearchResponse(BaseModel):
    users: list[ProfileSearchResult]
    posts: list[PostSearchResult]


__all__ = ["ProfileSearchResult", "PostSearchResult", "SearchResponse"]
