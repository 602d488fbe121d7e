"""Convenience exports for service layer."""
from .admin_service import load_admin_stats, require_admin_key, set_ban_state, verify_admin_key
from .auth_service import (
    create_access_token,
    decode_access_token,
    get_current_account_id,
    get_current_user,
    require_active_user,
)
from .post_service import (
    create_like,
    create_post_comment,
    create_post_record,
    delete_like,
    delete_post_record,
    get_post_record,
    list_feed_records,
    list_liked_post_records,
    list_likes_for_posts,
    list_post_comments,
    toggle_like_record,
)
from .profile_service import create_profile, get_profile, update_avatar, update_profile
from .realtime import invalidation_channel, invalidate_paths
from .search_service import search
from .storage_service import (
    ImageStore,
    StorageConfigurationError,
    StorageDeletionError,
    StorageUploadError,
    get_image_store,
)

__all__ = [
    "load_admin_stats",
    "require_admin_key",
    "set_ban_state",
    "verify_admin_key",
    "create_access_token",
    "decode_access_token",
    "get_current_account_id",
    "get_current_user",
    "require_active_user",
    "create_like",
    "create_post_comment",
    "create_post_record",
    "delete_like",
    "delete_post_record",
    "get_post_record",
    "list_feed_records",
    "list_liked_post_records",
    "list_likes_for_posts",
    "list_post_comments",
    "toggle_like_record",
    "create_profile",
    "get_profile",
    "update_avatar",
    "update_profile",
    "invalidation_channel",
    "invalidate_paths",
    "search",
    "ImageStore",
    "StorageConfigurationError",
    "StorageDeletionError",
    "StorageUploadError",
    "get_image_store",
]
