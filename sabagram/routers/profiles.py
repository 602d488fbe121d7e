"""Profile API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from ..constants import PROFILE_UPDATED_PATHS, profile_path
from ..database import get_session
from ..models import Profile
from ..schemas import AvatarUploadResponse, ProfileCreateRequest, ProfileResponse, ProfileUpdateRequest
from ..services import (
    ImageStore,
    create_profile,
    get_current_account_id,
    get_current_user,
    get_image_store,
    get_profile,
    invalidate_paths,
    require_active_user,
    update_avatar,
    update_profile,
)

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_my_profile(
    payload: ProfileCreateRequest,
    account_id: UUID = Depends(get_current_account_id),
    db: Session = Depends(get_session),
) -> ProfileResponse:
    """Create the profile for a newly signed-up account."""
    return ProfileResponse.model_validate(create_profile(db, account_id=account_id, payload=payload))


@router.get("/me", response_model=ProfileResponse)
async def retrieve_my_profile(current_user: Profile = Depends(get_current_user)) -> ProfileResponse:
    return ProfileResponse.model_validate(current_user)


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    payload: ProfileUpdateRequest,
    current_user: Profile = Depends(require_active_user),
    db: Session = Depends(get_session),
) -> ProfileResponse:
    updated = update_profile(db, user_id=current_user.id, payload=payload)
    await invalidate_paths(PROFILE_UPDATED_PATHS, [profile_path(updated.id)])
    return ProfileResponse.model_validate(updated)


@router.post("/me/avatar", response_model=AvatarUploadResponse)
async def upload_my_avatar(
    file: UploadFile = File(...),
    current_user: Profile = Depends(require_active_user),
    db: Session = Depends(get_session),
    store: ImageStore = Depends(get_image_store),
) -> AvatarUploadResponse:
    url = await update_avatar(db, profile=current_user, file=file, store=store)
    await invalidate_paths(PROFILE_UPDATED_PATHS, [profile_path(current_user.id)])
    return AvatarUploadResponse(url=url)


@router.get("/by-id/{user_id}", response_model=ProfileResponse)
async def retrieve_profile_by_id(user_id: UUID, db: Session = Depends(get_session)) -> ProfileResponse:
    return ProfileResponse.model_validate(get_profile(db, user_id=user_id))


__all__ = ["router"]
