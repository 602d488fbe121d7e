"""Substring search over usernames and captions."""
from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import Post, Profile


def _like_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def search(db: Session, *, query: str, limit: int) -> dict[str, list[dict[str, Any]]]:
    """Return up to ``limit`` profiles and ``limit`` posts matching ``query``."""

    text = query.strip()
    if not text:
        return {"users": [], "posts": []}
    pattern = _like_pattern(text)

    users = db.scalars(
        select(Profile).where(Profile.username.ilike(pattern, escape="\\")).order_by(Profile.username).limit(limit)
    ).all()
    post_rows = db.execute(
        select(Post, Profile.username)
        .join(Profile, Post.user_id == Profile.id)
        .where(Post.caption.ilike(pattern, escape="\\"))
        .order_by(Post.created_at.desc())
        .limit(limit)
    ).all()

    return {
        "users": [
            {"id": user.id, "username": user.username, "full_name": user.full_name, "avatar_url": user.avatar_url}
            for user in users
        ],
        "posts": [
            {"id": post.id, "caption": post.caption, "image_url": post.image_url, "username": username}
            for post, username in post_rows
        ],
    }


__all__ = ["search"]
