"""Project-wide constant values."""
from __future__ import annotations

from enum import Enum

ADMIN_KEY_HEADER = "X-Admin-Key"

BANNED_DETAIL = "Your account has been suspended."  # short reusable message


class LikeWrite(str, Enum):
    """Outcome of inserting a like row for a ``(post, user)`` pair."""

    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


# Page paths whose rendered caches go stale after each kind of mutation.
POST_CREATED_PATHS = ("/", "/dashboard", "/discover")
POST_DELETED_PATHS = ("/", "/dashboard", "/discover", "/admin")
LIKE_CHANGED_PATHS = ("/", "/dashboard", "/discover", "/liked")
COMMENT_ADDED_PATHS = ("/", "/dashboard", "/discover")
PROFILE_UPDATED_PATHS = ("/", "/dashboard", "/discover", "/settings/profile")
MODERATION_PATHS = ("/admin",)


def profile_path(user_id: object) -> str:
    return f"/profile/{user_id}"


__all__ = [
    "ADMIN_KEY_HEADER",
    "BANNED_DETAIL",
    "LikeWrite",
    "POST_CREATED_PATHS",
    "POST_DELETED_PATHS",
    "LIKE_CHANGED_PATHS",
    "COMMENT_ADDED_PATHS",
    "PROFILE_UPDATED_PATHS",
    "MODERATION_PATHS",
    "profile_path",
]
