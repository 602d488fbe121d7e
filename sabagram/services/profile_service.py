"""Profile creation, lookup and updates."""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Profile
from ..schemas import ProfileCreateRequest, ProfileUpdateRequest
from .storage_service import ImageStore, StorageConfigurationError, StorageUploadError, avatar_key

logger = logging.getLogger(__name__)


def _username_taken(db: Session, username: str, *, exclude_id: UUID | None = None) -> bool:
    stmt = select(Profile.id).where(func.lower(Profile.username) == username.lower())
    if exclude_id is not None:
        stmt = stmt.where(Profile.id != exclude_id)
    return db.scalar(stmt.limit(1)) is not None


def create_profile(db: Session, *, account_id: UUID, payload: ProfileCreateRequest) -> Profile:
    """Create the profile row for a freshly signed-up account."""

    if db.get(Profile, account_id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Profile already exists")
    if _username_taken(db, payload.username):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already in use")

    profile = Profile(
        id=account_id,
        username=payload.username,
        full_name=(payload.full_name or "").strip() or None,
    )
    db.add(profile)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already in use") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Profile creation failed for %s", account_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create profile") from exc

    db.refresh(profile)
    logger.info("Profile created successfully for: %s", profile.username)
    return profile


def get_profile(db: Session, *, user_id: UUID) -> Profile:
    profile = db.get(Profile, user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return profile


def update_profile(db: Session, *, user_id: UUID, payload: ProfileUpdateRequest) -> Profile:
    """Apply profile updates for the supplied ``user_id``; blank optional fields become null."""

    profile = get_profile(db, user_id=user_id)
    if payload.username != profile.username and _username_taken(db, payload.username, exclude_id=user_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already in use")

    for field, value in payload.model_dump().items():
        setattr(profile, field, value)

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Profile update error for %s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update profile",
        ) from exc

    db.refresh(profile)
    return profile


async def update_avatar(db: Session, *, profile: Profile, file: UploadFile, store: ImageStore) -> str:
    """Store a new avatar image and point the profile at it."""

    try:
        stored = await store.upload(file, key=avatar_key(profile.id, file.filename))
    except StorageConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    except StorageUploadError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to upload avatar") from exc

    profile.avatar_url = stored.url
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Avatar update failed for %s", profile.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update profile") from exc
    return stored.url


__all__ = ["create_profile", "get_profile", "update_profile", "update_avatar"]
