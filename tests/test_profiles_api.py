"""Integration tests for profile creation and editing."""
from __future__ import annotations

from uuid import uuid4

from fastapi.testclient import TestClient

from conftest import PUBLIC_BASE_URL, auth_headers
from sabagram.database import SessionLocal
from sabagram.main import app
from sabagram.models import Profile
from sabagram.services import create_access_token


def test_signed_up_account_creates_its_profile_once() -> None:
    account_id = uuid4()
    headers = {"Authorization": f"Bearer {create_access_token(account_id)}"}
    with TestClient(app) as client:
        before = client.get("/profiles/me", headers=headers)
        assert before.status_code == 401

        created = client.post("/profiles", headers=headers, json={"username": "  carol ", "full_name": "Carol"})
        assert created.status_code == 201, created.text
        assert created.json()["id"] == str(account_id)
        assert created.json()["username"] == "carol"

        duplicate = client.post("/profiles", headers=headers, json={"username": "carol2"})
        assert duplicate.status_code == 409

        me = client.get("/profiles/me", headers=headers)
        assert me.status_code == 200
        assert me.json()["full_name"] == "Carol"


def test_usernames_are_unique_ignoring_case(make_profile) -> None:
    make_profile("Dave")
    headers = {"Authorization": f"Bearer {create_access_token(uuid4())}"}
    with TestClient(app) as client:
        response = client.post("/profiles", headers=headers, json={"username": "dave"})

    assert response.status_code == 409


def test_invalid_token_is_rejected() -> None:
    with TestClient(app) as client:
        response = client.get("/profiles/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


def test_update_profile_blanks_become_null(make_profile) -> None:
    profile = make_profile("erin")
    make_profile("frank")
    with TestClient(app) as client:
        updated = client.put(
            "/profiles/me",
            headers=auth_headers(profile),
            json={"username": "erin", "full_name": "  ", "bio": "Photographer", "location": ""},
        )
        taken = client.put("/profiles/me", headers=auth_headers(profile), json={"username": "FRANK"})
        public = client.get(f"/profiles/by-id/{profile.id}")
        missing = client.get(f"/profiles/by-id/{uuid4()}")

    assert updated.status_code == 200, updated.text
    assert updated.json()["full_name"] is None
    assert updated.json()["bio"] == "Photographer"
    assert updated.json()["location"] is None
    assert taken.status_code == 409
    assert public.json()["username"] == "erin"
    assert missing.status_code == 404


def test_avatar_upload_points_profile_at_stored_image(make_profile, image_store) -> None:
    profile = make_profile("gina")
    with TestClient(app) as client:
        response = client.post(
            "/profiles/me/avatar",
            headers=auth_headers(profile),
            files={"file": ("me.png", b"png-bytes", "image/png")},
        )
        me = client.get("/profiles/me", headers=auth_headers(profile)).json()

    assert response.status_code == 200, response.text
    url = response.json()["url"]
    assert url.startswith(f"{PUBLIC_BASE_URL}/avatars/{profile.id}-")
    assert url.endswith(".png")
    assert me["avatar_url"] == url


def test_banned_profile_cannot_edit_or_delete(make_profile, image_store) -> None:
    profile = make_profile("hana")
    with TestClient(app) as client:
        post = client.post(
            "/posts",
            headers=auth_headers(profile),
            data={"caption": "before the ban"},
            files={"image": ("a.jpg", b"jpeg", "image/jpeg")},
        ).json()

        with SessionLocal() as session:
            stored = session.get(Profile, profile.id)
            stored.banned = True
            session.commit()

        rename = client.put("/profiles/me", headers=auth_headers(profile), json={"username": "hana2"})
        avatar = client.post(
            "/profiles/me/avatar",
            headers=auth_headers(profile),
            files={"file": ("me.png", b"png-bytes", "image/png")},
        )
        delete = client.delete(f"/posts/{post['id']}", headers=auth_headers(profile))
        still_there = client.get(f"/posts/{post['id']}")
        me = client.get("/profiles/me", headers=auth_headers(profile))

    assert rename.status_code == 403
    assert avatar.status_code == 403
    assert delete.status_code == 403
    assert still_there.status_code == 200
    assert me.json()["username"] == "hana"
    assert me.json()["avatar_url"] is None
    assert len(image_store.uploaded) == 1
