"""Integration tests for post, like and comment routes."""
from __future__ import annotations

from uuid import uuid4

from fastapi.testclient import TestClient

from conftest import PUBLIC_BASE_URL, auth_headers
from sabagram.database import SessionLocal
from sabagram.main import app
from sabagram.models import Comment, Like, Post


def _create_post(client: TestClient, profile, caption: str = "Sunset", **form) -> dict:
    response = client.post(
        "/posts",
        headers=auth_headers(profile),
        data={"caption": caption, **form},
        files={"image": ("sunset.jpg", b"\xff\xd8fake-jpeg", "image/jpeg")},
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_create_post_uploads_image_and_combines_description(make_profile, image_store) -> None:
    author = make_profile("alice")
    with TestClient(app) as client:
        post = _create_post(client, author, caption="  Beach day ", description="with friends")

    assert post["caption"] == "Beach day\n\nwith friends"
    assert post["username"] == "alice"
    assert post["image_url"].startswith(f"{PUBLIC_BASE_URL}/posts/{author.id}/")
    assert list(image_store.uploaded.values()) == [b"\xff\xd8fake-jpeg"]


def test_create_post_requires_caption_and_active_user(make_profile, image_store) -> None:
    author = make_profile("alice")
    banned = make_profile("mallory", banned=True)
    with TestClient(app) as client:
        blank = client.post(
            "/posts",
            headers=auth_headers(author),
            data={"caption": "   "},
            files={"image": ("a.png", b"png", "image/png")},
        )
        assert blank.status_code == 422

        suspended = client.post(
            "/posts",
            headers=auth_headers(banned),
            data={"caption": "hi"},
            files={"image": ("a.png", b"png", "image/png")},
        )
        assert suspended.status_code == 403

        anonymous = client.post("/posts", data={"caption": "hi"}, files={"image": ("a.png", b"png", "image/png")})
        assert anonymous.status_code == 401

    assert image_store.uploaded == {}


def test_feed_is_newest_first(make_profile, image_store) -> None:
    author = make_profile("alice")
    with TestClient(app) as client:
        first = _create_post(client, author, caption="first")
        second = _create_post(client, author, caption="second")

        feed = client.get("/posts/feed").json()["items"]
        limited = client.get("/posts/feed", params={"limit": 1}).json()["items"]
        by_user = client.get(f"/posts/by-user/{author.id}").json()["items"]
        missing_user = client.get(f"/posts/by-user/{uuid4()}")

    assert [item["id"] for item in feed] == [second["id"], first["id"]]
    assert [item["id"] for item in limited] == [second["id"]]
    assert len(by_user) == 2
    assert missing_user.status_code == 404


def test_duplicate_like_is_a_conflict(make_profile, image_store) -> None:
    author = make_profile("alice")
    fan = make_profile("bob")
    with TestClient(app) as client:
        post = _create_post(client, author)
        url = f"/posts/{post['id']}/likes"

        created = client.post(url, headers=auth_headers(fan))
        assert created.status_code == 201
        assert created.json()["outcome"] == "created"

        duplicate = client.post(url, headers=auth_headers(fan))
        assert duplicate.status_code == 409

        removed = client.delete(url, headers=auth_headers(fan))
        assert removed.status_code == 200
        assert removed.json()["outcome"] == "deleted"

        again = client.delete(url, headers=auth_headers(fan))
        assert again.status_code == 404

        unknown = client.post(f"/posts/{uuid4()}/likes", headers=auth_headers(fan))
        assert unknown.status_code == 404


def test_toggle_endpoint_alternates(make_profile, image_store) -> None:
    author = make_profile("alice")
    fan = make_profile("bob")
    with TestClient(app) as client:
        post = _create_post(client, author)
        url = f"/posts/{post['id']}/likes/toggle"

        states = [client.post(url, headers=auth_headers(fan)).json()["liked"] for _ in range(3)]
        likes = client.get("/likes", params={"post_ids": [post["id"]]}).json()["likes"]

    assert states == [True, False, True]
    assert likes == {post["id"]: [str(fan.id)]}


def test_banned_user_cannot_like(make_profile, image_store) -> None:
    author = make_profile("alice")
    banned = make_profile("mallory", banned=True)
    with TestClient(app) as client:
        post = _create_post(client, author)
        response = client.post(f"/posts/{post['id']}/likes", headers=auth_headers(banned))

    assert response.status_code == 403
    with SessionLocal() as session:
        assert session.query(Like).count() == 0


def test_likes_lookup_includes_posts_without_likes(make_profile, image_store) -> None:
    author = make_profile("alice")
    with TestClient(app) as client:
        liked = _create_post(client, author, caption="liked")
        lonely = _create_post(client, author, caption="lonely")
        client.post(f"/posts/{liked['id']}/likes", headers=auth_headers(author))

        likes = client.get("/likes", params={"post_ids": [liked["id"], lonely["id"]]}).json()["likes"]
        liked_feed = client.get("/posts/liked", headers=auth_headers(author)).json()["items"]

    assert likes == {liked["id"]: [str(author.id)], lonely["id"]: []}
    assert [item["id"] for item in liked_feed] == [liked["id"]]


def test_comment_preview_returns_oldest_first(make_profile, image_store) -> None:
    author = make_profile("alice")
    with TestClient(app) as client:
        post = _create_post(client, author)
        url = f"/posts/{post['id']}/comments"
        for text in ("one", "  two  ", "three"):
            assert client.post(url, headers=auth_headers(author), json={"content": text}).status_code == 201

        preview = client.get(url, params={"limit": 2}).json()["items"]
        newest = client.get(url, params={"limit": 1, "order": "desc"}).json()["items"]
        blank = client.post(url, headers=auth_headers(author), json={"content": "   "})

    assert [item["content"] for item in preview] == ["one", "two"]
    assert [item["content"] for item in newest] == ["three"]
    assert blank.status_code == 422


def test_only_author_can_delete_post(make_profile, image_store) -> None:
    author = make_profile("alice")
    other = make_profile("bob")
    with TestClient(app) as client:
        post = _create_post(client, author)
        client.post(f"/posts/{post['id']}/likes", headers=auth_headers(other))
        client.post(f"/posts/{post['id']}/comments", headers=auth_headers(other), json={"content": "nice"})

        forbidden = client.delete(f"/posts/{post['id']}", headers=auth_headers(other))
        assert forbidden.status_code == 404

        deleted = client.delete(f"/posts/{post['id']}", headers=auth_headers(author))
        assert deleted.status_code == 204
        assert client.get(f"/posts/{post['id']}").status_code == 404

    assert image_store.deleted == [post["image_url"]]
    with SessionLocal() as session:
        assert session.query(Post).count() == 0
        assert session.query(Like).count() == 0
        assert session.query(Comment).count() == 0


def test_search_matches_usernames_and_captions(make_profile, image_store) -> None:
    author = make_profile("sunny_days")
    make_profile("bob")
    with TestClient(app) as client:
        _create_post(client, author, caption="Sunny afternoon")
        _create_post(client, author, caption="Rain")

        results = client.get("/search", params={"q": "sunny"}).json()
        wildcard = client.get("/search", params={"q": "%"}).json()
        empty = client.get("/search", params={"q": "  "}).json()

    assert [user["username"] for user in results["users"]] == ["sunny_days"]
    assert [item["caption"] for item in results["posts"]] == ["Sunny afternoon"]
    assert wildcard == {"users": [], "posts": []}
    assert empty == {"users": [], "posts": []}


def test_caption_limit_applies_to_stored_text(make_profile, image_store) -> None:
    author = make_profile("alice")
    with TestClient(app) as client:
        padded = client.post(
            "/posts",
            headers=auth_headers(author),
            data={"caption": " " * 100 + "a" * 2190},
            files={"image": ("a.jpg", b"jpeg", "image/jpeg")},
        )
        too_long = client.post(
            "/posts",
            headers=auth_headers(author),
            data={"caption": "a" * 2000, "description": "b" * 500},
            files={"image": ("b.jpg", b"jpeg", "image/jpeg")},
        )

    assert padded.status_code == 201, padded.text
    assert len(padded.json()["caption"]) == 2190
    assert too_long.status_code == 422
    assert too_long.json()["detail"] == "Caption is too long"
    assert len(image_store.uploaded) == 1
