"""Aggregate router exports."""
from .admin import router as admin_router
from .posts import likes_router
from .posts import router as posts_router
from .profiles import router as profiles_router
from .realtime import router as realtime_router
from .search import router as search_router

__all__ = [
    "admin_router",
    "likes_router",
    "posts_router",
    "profiles_router",
    "realtime_router",
    "search_router",
]
