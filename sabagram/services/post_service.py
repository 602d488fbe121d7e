"""Business logic for posts, likes and comments stored in the relational database."""
from __future__ import annotations

import logging
from typing import Any, Iterable, cast
from uuid import UUID

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..constants import LikeWrite
from ..models import Comment, Like, Post, Profile
from .storage_service import (
    ImageStore,
    StorageConfigurationError,
    StorageDeletionError,
    StorageUploadError,
    post_image_key,
)

logger = logging.getLogger(__name__)


def _post_record(post: Post, username: Any, full_name: Any, avatar_url: Any) -> dict[str, Any]:
    return {
        "id": post.id,
        "user_id": post.user_id,
        "image_url": post.image_url,
        "caption": post.caption,
        "created_at": post.created_at,
        "username": cast(str | None, username),
        "full_name": cast(str | None, full_name),
        "avatar_url": cast(str | None, avatar_url),
    }


def _posts_with_authors():
    return select(Post, Profile.username, Profile.full_name, Profile.avatar_url).join(
        Profile, Post.user_id == Profile.id
    )


def _get_post_or_404(db: Session, post_id: UUID) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


def _combine_caption(caption: str, description: str | None) -> str:
    text = caption.strip()
    extra = (description or "").strip()
    return f"{text}\n\n{extra}" if extra else text


async def create_post_record(
    db: Session,
    *,
    author: Profile,
    image: UploadFile,
    caption: str,
    description: str | None,
    store: ImageStore,
) -> dict[str, Any]:
    """Upload the image, then persist the post; the upload is removed if the insert fails."""

    if not (caption or "").strip():
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Caption is required")
    text = _combine_caption(caption, description)
    if len(text) > get_settings().caption_max_length:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Caption is too long")

    try:
        stored = await store.upload(image, key=post_image_key(cast(UUID, author.id), image.filename))
    except StorageConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    except StorageUploadError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to upload image. Please try again.",
        ) from exc

    post = Post(user_id=author.id, image_url=stored.url, caption=text)
    db.add(post)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to save post for %s", author.id)
        try:
            await store.delete_url(stored.url)
        except StorageDeletionError:
            logger.warning("Orphaned upload left behind at %s", stored.url)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save post. Please try again.",
        ) from exc

    db.refresh(post)
    logger.info("Post %s created by %s", post.id, author.username)
    return _post_record(post, author.username, author.full_name, author.avatar_url)


def list_feed_records(
    db: Session,
    *,
    limit: int | None = None,
    author_id: UUID | None = None,
    post_ids: Iterable[UUID] | None = None,
) -> list[dict[str, Any]]:
    """Return posts newest first with their author summary."""

    statement = _posts_with_authors()
    if author_id is not None:
        statement = statement.where(Post.user_id == author_id)
    if post_ids is not None:
        ids = list(post_ids)
        if not ids:
            return []
        statement = statement.where(Post.id.in_(ids))
    statement = statement.order_by(Post.created_at.desc())
    if limit is not None:
        statement = statement.limit(limit)

    return [_post_record(*row) for row in db.execute(statement).all()]


def list_liked_post_records(db: Session, *, user_id: UUID) -> list[dict[str, Any]]:
    liked_ids = db.scalars(select(Like.post_id).where(Like.user_id == user_id)).all()
    return list_feed_records(db, post_ids=liked_ids)


def get_post_record(db: Session, *, post_id: UUID) -> dict[str, Any]:
    row = db.execute(_posts_with_authors().where(Post.id == post_id)).first()
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return _post_record(*row)


async def delete_post_record(
    db: Session,
    *,
    post_id: UUID,
    requester_id: UUID | None,
    store: ImageStore | None,
) -> None:
    """Delete a post; ``requester_id=None`` is the admin path that skips the author check.

    A non-author gets the same 404 as a missing post. Removing the image is
    best effort once the row is gone.
    """

    post = db.get(Post, post_id)
    if post is None or (requester_id is not None and post.user_id != requester_id):
        detail = "Post not found" if requester_id is None else "Post not found or you don't have permission to delete it"
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

    image_url = cast(str | None, post.image_url)
    try:
        db.delete(post)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to delete post %s", post_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete post from database",
        ) from exc

    logger.info("Post %s deleted", post_id)
    if store is None or not image_url:
        return
    try:
        await store.delete_url(image_url)
    except StorageDeletionError:
        logger.warning("Post %s deleted but its image could not be removed", post_id)


def create_like(db: Session, *, post_id: UUID, user_id: UUID) -> LikeWrite:
    """Insert a like; the unique constraint decides whether one already existed."""

    _get_post_or_404(db, post_id)
    db.add(Like(post_id=post_id, user_id=user_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return LikeWrite.ALREADY_EXISTS
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to add like on %s", post_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to add like") from exc
    return LikeWrite.CREATED


def delete_like(db: Session, *, post_id: UUID, user_id: UUID) -> bool:
    """Remove a like, returning whether a row was deleted."""

    try:
        result = db.execute(delete(Like).where(Like.post_id == post_id, Like.user_id == user_id))
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to remove like on %s", post_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to remove like") from exc
    return bool(result.rowcount)


def toggle_like_record(db: Session, *, post_id: UUID, user_id: UUID) -> bool:
    """Like the post, or unlike it when the like already exists. Returns the new state."""

    if create_like(db, post_id=post_id, user_id=user_id) is LikeWrite.CREATED:
        return True
    delete_like(db, post_id=post_id, user_id=user_id)
    return False


def list_likes_for_posts(db: Session, *, post_ids: Iterable[UUID]) -> dict[UUID, list[UUID]]:
    ids = list(dict.fromkeys(post_ids))
    likes: dict[UUID, list[UUID]] = {post_id: [] for post_id in ids}
    if not ids:
        return likes
    rows = db.execute(select(Like.post_id, Like.user_id).where(Like.post_id.in_(ids))).all()
    for post_id, user_id in rows:
        likes[post_id].append(user_id)
    return likes


def list_post_comments(
    db: Session,
    *,
    post_id: UUID,
    limit: int | None = None,
    oldest_first: bool = True,
) -> list[dict[str, Any]]:
    _get_post_or_404(db, post_id)
    order = Comment.created_at.asc() if oldest_first else Comment.created_at.desc()
    stmt = (
        select(Comment, Profile.username, Profile.avatar_url)
        .join(Profile, Comment.user_id == Profile.id)
        .where(Comment.post_id == post_id)
        .order_by(order)
    )
    if limit is not None:
        stmt = stmt.limit(limit)

    return [
        {
            "id": comment.id,
            "post_id": comment.post_id,
            "user_id": comment.user_id,
            "content": comment.content,
            "created_at": comment.created_at,
            "username": cast(str | None, username),
            "avatar_url": cast(str | None, avatar_url),
        }
        for comment, username, avatar_url in db.execute(stmt).all()
    ]


def create_post_comment(db: Session, *, post_id: UUID, author: Profile, content: str) -> dict[str, Any]:
    post = _get_post_or_404(db, post_id)
    text = (content or "").strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Comment cannot be empty")

    comment = Comment(post_id=post.id, user_id=author.id, content=text)
    db.add(comment)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to add comment on %s", post_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to add comment") from exc

    db.refresh(comment)
    return {
        "id": comment.id,
        "post_id": comment.post_id,
        "user_id": author.id,
        "content": comment.content,
        "created_at": comment.created_at,
        "username": author.username,
        "avatar_url": author.avatar_url,
    }


__all__ = [
    "create_like",
    "create_post_comment",
    "create_post_record",
    "delete_like",
    "delete_post_record",
    "get_post_record",
    "list_feed_records",
    "list_liked_post_records",
    "list_likes_for_posts",
    "list_post_comments",
    "toggle_like_record",
]
