"""Post, like and comment API routes."""
from __future__ import annotations

import logging
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from ..config import get_settings
from ..constants import (
    COMMENT_ADDED_PATHS,
    LIKE_CHANGED_PATHS,
    POST_CREATED_PATHS,
    POST_DELETED_PATHS,
    LikeWrite,
    profile_path,
)
from ..database import get_session
from ..models import Profile
from ..schemas import (
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    LikesByPostResponse,
    LikeToggleResponse,
    LikeWriteResponse,
    PostFeedResponse,
    PostResponse,
)
from ..services import (
    ImageStore,
    create_like,
    create_post_comment,
    create_post_record,
    delete_like,
    delete_post_record,
    get_current_user,
    get_image_store,
    get_post_record,
    invalidate_paths,
    list_feed_records,
    list_liked_post_records,
    list_likes_for_posts,
    list_post_comments,
    require_active_user,
    toggle_like_record,
)

router = APIRouter(prefix="/posts", tags=["posts"])
likes_router = APIRouter(prefix="/likes", tags=["likes"])

logger = logging.getLogger(__name__)


def _feed(records) -> PostFeedResponse:
    return PostFeedResponse(items=[PostResponse.model_validate(item) for item in records])


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post_endpoint(
    image: UploadFile = File(...),
    caption: str = Form(...),
    description: str | None = Form(None),
    db: Session = Depends(get_session),
    current_user: Profile = Depends(require_active_user),
    store: ImageStore = Depends(get_image_store),
) -> PostResponse:
    """Create a post from a ``multipart/form-data`` upload of ``image`` plus ``caption``.

    ``description`` is optional and is stored below the caption, separated by
    a blank line.
    """

    record = await create_post_record(
        db,
        author=current_user,
        image=image,
        caption=caption,
        description=description,
        store=store,
    )
    await invalidate_paths(POST_CREATED_PATHS, [profile_path(current_user.id)])
    return PostResponse.model_validate(record)


@router.get("/feed", response_model=PostFeedResponse)
async def feed_endpoint(
    limit: int | None = Query(None, ge=1, le=100),
    db: Session = Depends(get_session),
) -> PostFeedResponse:
    page_size = limit or get_settings().feed_page_size
    return _feed(list_feed_records(db, limit=page_size))


@router.get("/discover", response_model=PostFeedResponse)
async def discover_endpoint(db: Session = Depends(get_session)) -> PostFeedResponse:
    return _feed(list_feed_records(db))


@router.get("/liked", response_model=PostFeedResponse)
async def liked_posts_endpoint(
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> PostFeedResponse:
    return _feed(list_liked_post_records(db, user_id=current_user.id))


@router.get("/by-user/{user_id}", response_model=PostFeedResponse)
async def posts_by_user_endpoint(
    user_id: UUID,
    db: Session = Depends(get_session),
) -> PostFeedResponse:
    if db.get(Profile, user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return _feed(list_feed_records(db, author_id=user_id))


@router.get("/{post_id}", response_model=PostResponse)
async def get_post_endpoint(post_id: UUID, db: Session = Depends(get_session)) -> PostResponse:
    return PostResponse.model_validate(get_post_record(db, post_id=post_id))


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(require_active_user),
    store: ImageStore = Depends(get_image_store),
) -> None:
    await delete_post_record(db, post_id=post_id, requester_id=current_user.id, store=store)
    await invalidate_paths(POST_DELETED_PATHS)


@router.post("/{post_id}/likes", response_model=LikeWriteResponse, status_code=status.HTTP_201_CREATED)
async def create_like_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(require_active_user),
) -> LikeWriteResponse:
    outcome = create_like(db, post_id=post_id, user_id=current_user.id)
    if outcome is LikeWrite.ALREADY_EXISTS:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Like already exists")
    await invalidate_paths(LIKE_CHANGED_PATHS)
    return LikeWriteResponse(post_id=post_id, user_id=current_user.id, outcome=outcome.value)


@router.delete("/{post_id}/likes", response_model=LikeWriteResponse)
async def delete_like_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(require_active_user),
) -> LikeWriteResponse:
    if not delete_like(db, post_id=post_id, user_id=current_user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Like not found")
    await invalidate_paths(LIKE_CHANGED_PATHS)
    return LikeWriteResponse(post_id=post_id, user_id=current_user.id, outcome="deleted")


@router.post("/{post_id}/likes/toggle", response_model=LikeToggleResponse)
async def toggle_like_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(require_active_user),
) -> LikeToggleResponse:
    liked = toggle_like_record(db, post_id=post_id, user_id=current_user.id)
    logger.debug("Like on %s by %s is now %s", post_id, current_user.id, liked)
    await invalidate_paths(LIKE_CHANGED_PATHS)
    return LikeToggleResponse(post_id=post_id, liked=liked)


@router.get("/{post_id}/comments", response_model=CommentListResponse)
async def list_comments_endpoint(
    post_id: UUID,
    limit: int | None = Query(None, ge=1, le=500),
    order: Literal["asc", "desc"] = "asc",
    db: Session = Depends(get_session),
) -> CommentListResponse:
    items = list_post_comments(db, post_id=post_id, limit=limit, oldest_first=order == "asc")
    return CommentListResponse(items=[CommentResponse.model_validate(item) for item in items])


@router.post("/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment_endpoint(
    post_id: UUID,
    payload: CommentCreate,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(require_active_user),
) -> CommentResponse:
    comment = create_post_comment(db, post_id=post_id, author=current_user, content=payload.content)
    await invalidate_paths(COMMENT_ADDED_PATHS)
    return CommentResponse.model_validate(comment)


@likes_router.get("", response_model=LikesByPostResponse)
async def likes_for_posts_endpoint(
    post_ids: list[UUID] = Query(default=[]),
    db: Session = Depends(get_session),
) -> LikesByPostResponse:
    return LikesByPostResponse(likes=list_likes_for_posts(db, post_ids=post_ids))


__all__ = ["router", "likes_router"]
