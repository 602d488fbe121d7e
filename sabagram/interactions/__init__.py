"""Client-side interaction layer: optimistic likes, comments and post lifecycle."""
from .collection import PostCollection, PostEntry
from .comments import CommentAppendCoordinator, CommentDraft
from .errors import (
    InteractionError,
    NotFoundError,
    PermissionDeniedError,
    ToggleInFlightError,
    TransientGatewayError,
    ValidationError,
)
from .gateway import Gateway, LikeWrite
from .http_gateway import HttpGateway
from .invalidation import InvalidationBus
from .likes import LikeToggleCoordinator, LikeToggleResult
from .models import Comment, ImageUpload, Post
from .posts import PostLifecycleCoordinator
from .session import AuthSession

__all__ = [
    "AuthSession",
    "Comment",
    "CommentAppendCoordinator",
    "CommentDraft",
    "Gateway",
    "HttpGateway",
    "ImageUpload",
    "InteractionError",
    "InvalidationBus",
    "LikeToggleCoordinator",
    "LikeToggleResult",
    "LikeWrite",
    "NotFoundError",
    "PermissionDeniedError",
    "Post",
    "PostCollection",
    "PostEntry",
    "PostLifecycleCoordinator",
    "ToggleInFlightError",
    "TransientGatewayError",
    "ValidationError",
]
