"""SQLAlchemy ORM model for user profiles."""
from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func

from sabagram.database import Base


class Profile(Base):
    __tablename__ = "profiles"

    # Same id as the identity provider's account; never generated here.
    id = Column(UUID(as_uuid=True), primary_key=True)
    username = Column(String(150), unique=True, nullable=False, index=True)
    full_name = Column(String(150), nullable=True)
    avatar_url = Column(String(1024), nullable=True)
    bio = Column(String(500), nullable=True)
    location = Column(String(255), nullable=True)
    banned = Column(Boolean, nullable=False, server_default=expression.false(), default=False)
    ban_reason = Column(String(500), nullable=True)
    banned_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    posts = relationship("Post", back_populates="author", cascade="all, delete-orphan")
    likes = relationship("Like", back_populates="user", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="user", cascade="all, delete-orphan")


__all__ = ["Profile"]
