"""Schemas for profile endpoints."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    full_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    location: str | None = None
    banned: bool = False
    ban_reason: str | None = None
    created_at: datetime


class ProfileCreateRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=150)
    full_name: str | None = Field(default=None, max_length=150)

    @field_validator("username")
    def strip_username(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("username cannot be blank")
        return cleaned


class ProfileUpdateRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=150)
    full_name: str | None = Field(default=None, max_length=150)
    bio: str | None = Field(default=None, max_length=500)
    location: str | None = Field(default=None, max_length=255)

    @field_validator("username")
    def strip_username(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("username cannot be blank")
        return cleaned

    @field_validator("full_name", "bio", "location", mode="before")
    def blank_to_none(cls, v):
        if v is None:
            return None
        cleaned = str(v).strip()
        return cleaned or None


class AvatarUploadResponse(BaseModel):
    url: str


__all__ = ["ProfileResponse", "ProfileCreateRequest", "ProfileUpdateRequest", "AvatarUploadResponse"]
