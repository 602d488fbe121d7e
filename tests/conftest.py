"""Shared fixtures: a throwaway SQLite database, profiles and a fake image store."""
from __future__ import annotations

import os
import uuid
from typing import Callable, Iterator

import pytest
from fastapi import UploadFile
from sqlalchemy import delete

# Ensure configuration is available before importing application modules.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_sabagram.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("ADMIN_KEY", "test-admin-key")

from sabagram.database import Base, SessionLocal, engine  # noqa: E402
from sabagram.main import app  # noqa: E402
from sabagram.models import Comment, Like, Post, Profile  # noqa: E402
from sabagram.services import create_access_token, get_image_store  # noqa: E402
from sabagram.services.storage_service import StoredObject  # noqa: E402

PUBLIC_BASE_URL = "https://images.example.test"


class FakeImageStore:
    """Stands in for the S3-backed store; remembers what was uploaded and deleted."""

    def __init__(self) -> None:
        self.uploaded: dict[str, bytes] = {}
        self.deleted: list[str] = []

    async def upload(self, file: UploadFile, *, key: str) -> StoredObject:
        self.uploaded[key] = await file.read()
        return StoredObject(key=key, url=f"{PUBLIC_BASE_URL}/{key}", content_type=file.content_type or "")

    async def delete_url(self, url: str) -> None:
        self.deleted.append(url)


@pytest.fixture(scope="session", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    with SessionLocal() as session:
        for model in (Comment, Like, Post, Profile):
            session.execute(delete(model))
        session.commit()
    yield


@pytest.fixture()
def image_store() -> Iterator[FakeImageStore]:
    store = FakeImageStore()
    app.dependency_overrides[get_image_store] = lambda: store
    yield store
    app.dependency_overrides.pop(get_image_store, None)


@pytest.fixture()
def make_profile() -> Callable[..., Profile]:
    def _make(username: str, *, banned: bool = False) -> Profile:
        with SessionLocal() as session:
            profile = Profile(id=uuid.uuid4(), username=username, full_name=username.title(), banned=banned)
            session.add(profile)
            session.commit()
            session.refresh(profile)
            return profile

    return _make


def auth_headers(profile: Profile) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(profile.id)}"}


def admin_headers(key: str = "test-admin-key") -> dict[str, str]:
    return {"X-Admin-Key": key}
