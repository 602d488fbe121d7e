"""Schemas describing the admin moderation surface."""
from __future__ import annotations

from pydantic import BaseModel, Field


class AdminVerifyRequest(BaseModel):
    admin_key: str


class AdminVerifyResponse(BaseModel):
    success: bool
    message: str


class AdminStatsResponse(BaseModel):
    total_users: int = 0
    total_posts: int = 0
    total_likes: int = 0
    total_comments: int = 0
    banned_users: int = 0


class BanRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=500)


__all__ = [
    "AdminVerifyRequest",
    "AdminVerifyResponse",
    "AdminStatsResponse",
    "BanRequest",
]
