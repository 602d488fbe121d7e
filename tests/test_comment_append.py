"""Tests for comment submission and preview refresh."""
from __future__ import annotations

import asyncio
import uuid

import pytest

from fake_gateway import FakeGateway, make_post
from sabagram.interactions import (
    AuthSession,
    CommentAppendCoordinator,
    CommentDraft,
    NotFoundError,
    PostCollection,
    TransientGatewayError,
    ValidationError,
)


def _setup():
    gateway = FakeGateway()
    post = gateway.add_post(make_post(uuid.uuid4()))
    feed = PostCollection("feed")
    dialog = PostCollection("dialog")
    for collection in (feed, dialog):
        collection.upsert(post)
    return gateway, post, feed, dialog


def test_blank_comment_never_calls_gateway() -> None:
    gateway, post, feed, _ = _setup()
    draft = CommentDraft("   ")

    with pytest.raises(ValidationError):
        asyncio.run(CommentAppendCoordinator(gateway).add_comment(AuthSession(uuid.uuid4()), post.id, "   ", [feed]))
    with pytest.raises(ValidationError):
        asyncio.run(CommentAppendCoordinator(gateway).add_comment(AuthSession(uuid.uuid4()), post.id, draft, [feed]))

    assert gateway.calls == []
    assert draft.text == "   "


def test_preview_is_replaced_with_two_oldest_comments() -> None:
    user = AuthSession(uuid.uuid4())
    gateway, post, feed, dialog = _setup()
    coordinator = CommentAppendCoordinator(gateway)

    async def scenario():
        for text in ("first", "  second ", "third"):
            await coordinator.add_comment(user, post.id, text, [feed, dialog])

    asyncio.run(scenario())

    assert [c.content for c in feed.comments_preview_of(post.id)] == ["first", "second"]
    assert dialog.comments_preview_of(post.id) == feed.comments_preview_of(post.id)
    assert len(gateway.comments[post.id]) == 3


def test_draft_is_cleared_on_success() -> None:
    user = AuthSession(uuid.uuid4())
    gateway, post, feed, _ = _setup()
    draft = CommentDraft("Lovely light")

    preview = asyncio.run(CommentAppendCoordinator(gateway).add_comment(user, post.id, draft, [feed]))

    assert draft.text == ""
    assert [c.content for c in preview] == ["Lovely light"]
    assert feed.comments_preview_of(post.id) == preview


def test_failed_submit_restores_draft_and_leaves_preview_alone() -> None:
    user = AuthSession(uuid.uuid4())
    gateway, post, feed, _ = _setup()
    gateway.fail_next = TransientGatewayError("Network error. Please try again.")
    draft = CommentDraft("  keep me ")

    with pytest.raises(TransientGatewayError):
        asyncio.run(CommentAppendCoordinator(gateway).add_comment(user, post.id, draft, [feed]))

    assert draft.text == "  keep me "
    assert feed.comments_preview_of(post.id) == []
    assert "fetch_comments_preview" not in gateway.calls


def test_comment_on_deleted_post_raises_not_found() -> None:
    user = AuthSession(uuid.uuid4())
    gateway, post, feed, _ = _setup()
    del gateway.posts[post.id]

    with pytest.raises(NotFoundError):
        asyncio.run(CommentAppendCoordinator(gateway).add_comment(user, post.id, "hello", [feed]))


def test_preview_limit_is_configurable_and_closed_collections_skip() -> None:
    user = AuthSession(uuid.uuid4())
    gateway, post, feed, dialog = _setup()
    coordinator = CommentAppendCoordinator(gateway, preview_limit=1)
    dialog.close()

    async def scenario():
        await coordinator.add_comment(user, post.id, "a", [feed, dialog])
        await coordinator.add_comment(user, post.id, "b", [feed, dialog])

    asyncio.run(scenario())

    assert [c.content for c in feed.comments_preview_of(post.id)] == ["a"]
    assert dialog.comments_preview_of(post.id) == []
