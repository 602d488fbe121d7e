"""Unit tests for the per-screen post cache."""
from __future__ import annotations

import uuid
from dataclasses import replace

from fake_gateway import make_post
from sabagram.interactions import Comment, PostCollection


def test_load_orders_newest_first_and_keeps_likes() -> None:
    author, fan = uuid.uuid4(), uuid.uuid4()
    old = make_post(author, minutes=1)
    new = make_post(author, minutes=5)
    collection = PostCollection("feed")

    collection.load([old, new], {old.id: {fan}})

    assert collection.post_ids == [new.id, old.id]
    assert collection.likes_of(old.id) == {fan}
    assert collection.like_count(new.id) == 0


def test_apply_like_delta_is_idempotent() -> None:
    post = make_post(uuid.uuid4())
    user = uuid.uuid4()
    collection = PostCollection("feed")
    collection.upsert(post)

    assert collection.apply_like_delta(post.id, user, True) is True
    assert collection.apply_like_delta(post.id, user, True) is False
    assert collection.likes_of(post.id) == {user}

    assert collection.apply_like_delta(post.id, user, False) is True
    assert collection.apply_like_delta(post.id, user, False) is False
    assert collection.likes_of(post.id) == frozenset()


def test_like_delta_for_unknown_post_is_ignored() -> None:
    collection = PostCollection("grid")

    assert collection.apply_like_delta(uuid.uuid4(), uuid.uuid4(), True) is False
    assert len(collection) == 0


def test_upsert_refreshes_post_and_keeps_cached_likes() -> None:
    author, fan = uuid.uuid4(), uuid.uuid4()
    first = make_post(author, minutes=1)
    second = make_post(author, minutes=2)
    collection = PostCollection("feed")
    collection.load([first], {first.id: {fan}})

    collection.upsert(second, at_top=True)
    collection.upsert(replace(first, caption="edited"))

    assert collection.post_ids == [second.id, first.id]
    entry = collection.get(first.id)
    assert entry is not None
    assert entry.post.caption == "edited"
    assert entry.likes == {fan}


def test_remove_if_absent_and_closed_collection_ignores_writes() -> None:
    post = make_post(uuid.uuid4())
    user = uuid.uuid4()
    collection = PostCollection("dialog")
    collection.upsert(post)
    comment = Comment(id=uuid.uuid4(), post_id=post.id, user_id=user, content="hi", created_at=post.created_at)

    collection.close()

    assert collection.is_live is False
    assert collection.apply_like_delta(post.id, user, True) is False
    assert collection.replace_comments_preview(post.id, [comment]) is False
    assert collection.remove_if_absent(post.id) is False
    assert post.id in collection
    assert collection.likes_of(post.id) == frozenset()


def test_replace_comments_preview() -> None:
    post = make_post(uuid.uuid4())
    user = uuid.uuid4()
    collection = PostCollection("feed")
    collection.upsert(post)
    comment = Comment(id=uuid.uuid4(), post_id=post.id, user_id=user, content="hi", created_at=post.created_at)

    assert collection.replace_comments_preview(post.id, [comment]) is True
    assert collection.comments_preview_of(post.id) == [comment]
    assert collection.remove_if_absent(post.id) is True
    assert post.id not in collection
