"""Gateway implementation that talks to the Sabagram HTTP API with httpx."""
from __future__ import annotations

import logging
from typing import Any, Iterable
from uuid import UUID

import httpx

from ..constants import LikeWrite
from .errors import (
    InteractionError,
    NotFoundError,
    PermissionDeniedError,
    TransientGatewayError,
    ValidationError,
)
from .gateway import Gateway
from .invalidation import InvalidationBus
from .models import Comment, ImageUpload, Post
from .session import AuthSession

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def _detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, list):
        return "; ".join(str(item.get("msg", item)) if isinstance(item, dict) else str(item) for item in detail)
    if detail:
        return str(detail)
    return response.reason_phrase


def error_for_response(response: httpx.Response, *, post_id: UUID | None = None) -> InteractionError:
    """Translate a failed HTTP response into the matching interaction error."""

    status_code = response.status_code
    message = _detail(response)
    if status_code in (400, 422):
        return ValidationError(message, post_id=post_id)
    if status_code in (401, 403):
        return PermissionDeniedError(message, post_id=post_id)
    if status_code == 404:
        return NotFoundError(message, post_id=post_id)
    if status_code == 429 or status_code >= 500:
        return TransientGatewayError(message, post_id=post_id)
    return InteractionError(message, post_id=post_id)


class HttpGateway(Gateway):
    """Gateway backed by the REST API served by :mod:`sabagram.main`."""

    def __init__(
        self,
        base_url: str = "",
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        invalidations: InvalidationBus | None = None,
    ) -> None:
        super().__init__(invalidations)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpGateway":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        url: str,
        *,
        session: AuthSession | None = None,
        post_id: UUID | None = None,
        allow_statuses: tuple[int, ...] = (),
        **kwargs: Any,
    ) -> httpx.Response:
        headers = session.auth_headers() if session is not None else {}
        try:
            response = await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out", method, url)
            raise TransientGatewayError("Request timed out. Please try again.", post_id=post_id) from exc
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransientGatewayError("Network error. Please try again.", post_id=post_id) from exc

        if response.is_success or response.status_code in allow_statuses:
            return response
        raise error_for_response(response, post_id=post_id)

    async def create_like(self, session: AuthSession, post_id: UUID) -> LikeWrite:
        response = await self._request(
            "POST",
            f"/posts/{post_id}/likes",
            session=session,
            post_id=post_id,
            allow_statuses=(409,),
        )
        if response.status_code == 409:
            return LikeWrite.ALREADY_EXISTS
        return LikeWrite.CREATED

    async def delete_like(self, session: AuthSession, post_id: UUID) -> None:
        await self._request("DELETE", f"/posts/{post_id}/likes", session=session, post_id=post_id)

    async def create_comment(self, session: AuthSession, post_id: UUID, content: str) -> UUID:
        response = await self._request(
            "POST",
            f"/posts/{post_id}/comments",
            session=session,
            post_id=post_id,
            json={"content": content},
        )
        return UUID(str(response.json()["id"]))

    async def fetch_comments_preview(self, post_id: UUID, limit: int, *, oldest_first: bool = True) -> list[Comment]:
        response = await self._request(
            "GET",
            f"/posts/{post_id}/comments",
            post_id=post_id,
            params={"limit": limit, "order": "asc" if oldest_first else "desc"},
        )
        return [Comment.from_payload(item) for item in response.json()["items"]][:limit]

    async def fetch_likes(self, post_ids: Iterable[UUID]) -> dict[UUID, set[UUID]]:
        ids = list(dict.fromkeys(post_ids))
        likes: dict[UUID, set[UUID]] = {post_id: set() for post_id in ids}
        if not ids:
            return likes
        response = await self._request("GET", "/likes", params={"post_ids": [str(post_id) for post_id in ids]})
        for raw_post_id, user_ids in response.json()["likes"].items():
            likes[UUID(str(raw_post_id))] = {UUID(str(user_id)) for user_id in user_ids}
        return likes

    async def fetch_feed(self, *, limit: int | None = None) -> list[Post]:
        params = {"limit": limit} if limit is not None else None
        response = await self._request("GET", "/posts/feed", params=params)
        return [Post.from_payload(item) for item in response.json()["items"]]

    async def fetch_post(self, post_id: UUID) -> Post:
        response = await self._request("GET", f"/posts/{post_id}", post_id=post_id)
        return Post.from_payload(response.json())

    async def create_post(
        self,
        session: AuthSession,
        *,
        image: ImageUpload,
        caption: str,
        description: str | None = None,
    ) -> Post:
        data = {"caption": caption}
        if description:
            data["description"] = description
        response = await self._request(
            "POST",
            "/posts",
            session=session,
            data=data,
            files={"image": (image.filename, image.content, image.content_type)},
        )
        return Post.from_payload(response.json())

    async def delete_post(self, session: AuthSession, post_id: UUID) -> None:
        await self._request("DELETE", f"/posts/{post_id}", session=session, post_id=post_id)


__all__ = ["HttpGateway", "error_for_response"]
