"""Admin moderation routes guarded by the shared admin key."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..constants import MODERATION_PATHS, POST_DELETED_PATHS
from ..database import get_session
from ..schemas import AdminStatsResponse, AdminVerifyRequest, AdminVerifyResponse, BanRequest, ProfileResponse
from ..services import (
    ImageStore,
    delete_post_record,
    get_image_store,
    invalidate_paths,
    load_admin_stats,
    require_admin_key,
    set_ban_state,
    verify_admin_key,
)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/verify", response_model=AdminVerifyResponse)
async def verify_admin_endpoint(payload: AdminVerifyRequest) -> AdminVerifyResponse:
    if verify_admin_key(payload.admin_key):
        return AdminVerifyResponse(success=True, message="Admin access granted")
    return AdminVerifyResponse(success=False, message="Invalid admin key")


@router.get("/stats", response_model=AdminStatsResponse, dependencies=[Depends(require_admin_key)])
async def admin_stats_endpoint(db: Session = Depends(get_session)) -> AdminStatsResponse:
    return load_admin_stats(db)


@router.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_admin_key)])
async def admin_delete_post_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    store: ImageStore = Depends(get_image_store),
) -> None:
    await delete_post_record(db, post_id=post_id, requester_id=None, store=store)
    await invalidate_paths(POST_DELETED_PATHS)


@router.post("/users/{user_id}/ban", response_model=ProfileResponse, dependencies=[Depends(require_admin_key)])
async def ban_user_endpoint(
    user_id: UUID,
    payload: BanRequest | None = None,
    db: Session = Depends(get_session),
) -> ProfileResponse:
    profile = set_ban_state(db, user_id=user_id, banned=True, reason=payload.reason if payload else None)
    await invalidate_paths(MODERATION_PATHS)
    return ProfileResponse.model_validate(profile)


@router.post("/users/{user_id}/unban", response_model=ProfileResponse, dependencies=[Depends(require_admin_key)])
async def unban_user_endpoint(user_id: UUID, db: Session = Depends(get_session)) -> ProfileResponse:
    profile = set_ban_state(db, user_id=user_id, banned=False)
    await invalidate_paths(MODERATION_PATHS)
    return ProfileResponse.model_validate(profile)


__all__ = ["router"]
