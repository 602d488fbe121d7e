"""Convenience exports for schema layer."""
from .admin import AdminStatsResponse, AdminVerifyRequest, AdminVerifyResponse, BanRequest
from .posts import (
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    LikesByPostResponse,
    LikeToggleResponse,
    LikeWriteResponse,
    PostFeedResponse,
    PostResponse,
)
from .profiles import AvatarUploadResponse, ProfileCreateRequest, ProfileResponse, ProfileUpdateRequest
from .search import PostSearchResult, ProfileSearchResult, SearchResponse

__all__ = [
    "AdminStatsResponse",
    "AdminVerifyRequest",
    "AdminVerifyResponse",
    "BanRequest",
    "CommentCreate",
    "CommentListResponse",
    "CommentResponse",
    "LikesByPostResponse",
    "LikeToggleResponse",
    "LikeWriteResponse",
    "PostFeedResponse",
    "PostResponse",
    "AvatarUploadResponse",
    "ProfileCreateRequest",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "PostSearchResult",
    "ProfileSearchResult",
    "SearchResponse",
]
