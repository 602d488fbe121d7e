"""Client-side value objects for posts and comments."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


@dataclass(frozen=True, slots=True)
class Post:
    id: UUID
    user_id: UUID
    image_url: str
    created_at: datetime
    caption: str | None = None
    username: str | None = None
    full_name: str | None = None
    avatar_url: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Post":
        return cls(
            id=UUID(str(payload["id"])),
            user_id=UUID(str(payload["user_id"])),
            image_url=str(payload["image_url"]),
            created_at=_parse_datetime(payload["created_at"]),
            caption=_optional_str(payload.get("caption")),
            username=_optional_str(payload.get("username")),
            full_name=_optional_str(payload.get("full_name")),
            avatar_url=_optional_str(payload.get("avatar_url")),
        )


@dataclass(frozen=True, slots=True)
class Comment:
    id: UUID
    post_id: UUID
    user_id: UUID
    content: str
    created_at: datetime
    username: str | None = None
    avatar_url: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Comment":
        return cls(
            id=UUID(str(payload["id"])),
            post_id=UUID(str(payload["post_id"])),
            user_id=UUID(str(payload["user_id"])),
            content=str(payload["content"]),
            created_at=_parse_datetime(payload["created_at"]),
            username=_optional_str(payload.get("username")),
            avatar_url=_optional_str(payload.get("avatar_url")),
        )


@dataclass(frozen=True, slots=True)
class ImageUpload:
    """An image picked by the user, not yet stored."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


__all__ = ["Post", "Comment", "ImageUpload"]
