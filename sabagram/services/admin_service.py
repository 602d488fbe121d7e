"""Shared-secret admin checks plus moderation actions and stats."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

from fastapi import Header, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import ADMIN_KEY_HEADER
from ..models import Comment, Like, Post, Profile
from ..schemas import AdminStatsResponse
from ..security.secrets import MissingSecretError, require_secret, secrets_match

logger = logging.getLogger(__name__)


def verify_admin_key(admin_key: str | None) -> bool:
    """Compare ``admin_key`` against ``ADMIN_KEY``; an unset key never matches."""

    try:
        expected = require_secret("ADMIN_KEY")
    except MissingSecretError:
        logger.error("ADMIN_KEY is not configured; admin access is disabled")
        return False
    matched = secrets_match(admin_key, expected)
    if not matched:
        logger.warning("Rejected admin key verification attempt")
    return matched


async def require_admin_key(
    x_admin_key: str | None = Header(default=None, alias=ADMIN_KEY_HEADER),
) -> None:
    if not verify_admin_key(x_admin_key):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid admin key")


def _count(db: Session, column, *criteria) -> int:
    return int(db.scalar(select(func.count(column)).where(*criteria)) or 0)


def load_admin_stats(db: Session) -> AdminStatsResponse:
    return AdminStatsResponse(
        total_users=_count(db, Profile.id),
        total_posts=_count(db, Post.id),
        total_likes=_count(db, Like.id),
        total_comments=_count(db, Comment.id),
        banned_users=_count(db, Profile.id, Profile.banned.is_(True)),
    )


def set_ban_state(db: Session, *, user_id: UUID, banned: bool, reason: str | None = None) -> Profile:
    profile = db.get(Profile, user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    profile.banned = banned
    if banned:
        profile.ban_reason = (reason or "").strip() or None
        profile.banned_at = datetime.now(timezone.utc)
    else:
        profile.ban_reason = None
        profile.banned_at = None

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        action = "ban" if banned else "unban"
        logger.exception("Failed to %s user %s", action, user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to {action} user",
        ) from exc

    db.refresh(profile)
    logger.info("Profile %s %s", user_id, "banned" if banned else "unbanned")
    return profile


__all__ = ["verify_admin_key", "require_admin_key", "load_admin_stats", "set_ban_state"]
