"""S3-compatible object storage for post images and avatars."""
from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from urllib.parse import urlparse
from uuid import UUID

from boto3.session import Session
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from ..config import get_settings
from ..security.secrets import MissingSecretError, is_placeholder, require_secret

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StorageConfig:
    """Runtime configuration extracted from settings and secrets."""

    bucket: str
    endpoint_url: str | None
    region: str | None
    access_key: str
    secret_key: str
    public_base_url: str


@dataclass(frozen=True)
class StoredObject:
    """Metadata returned after uploading a file."""

    key: str
    url: str
    content_type: str


class StorageConfigurationError(RuntimeError):
    """Raised when required storage settings are missing or invalid."""


class StorageUploadError(RuntimeError):
    """Raised when an upload to object storage fails."""


class StorageDeletionError(RuntimeError):
    """Raised when deleting an object from storage fails."""


@lru_cache(maxsize=1)
def load_storage_config() -> StorageConfig:
    """Read and validate object storage configuration."""

    settings = get_settings()
    bucket = (settings.storage_bucket or "").strip()
    if is_placeholder(bucket):
        raise StorageConfigurationError("STORAGE_BUCKET must be set to the target bucket name")

    try:
        access_key = require_secret("STORAGE_ACCESS_KEY")
        secret_key = require_secret("STORAGE_SECRET_KEY")
    except MissingSecretError as exc:
        raise StorageConfigurationError(str(exc)) from exc

    endpoint_url = (settings.storage_endpoint_url or "").strip() or None
    public_base_url = (settings.storage_public_base_url or "").strip()
    if not public_base_url:
        if endpoint_url is None:
            raise StorageConfigurationError("Set STORAGE_PUBLIC_BASE_URL or STORAGE_ENDPOINT_URL")
        public_base_url = f"{endpoint_url.rstrip('/')}/{bucket}"

    parsed = urlparse(public_base_url)
    if not parsed.scheme or not parsed.netloc:
        raise StorageConfigurationError("STORAGE_PUBLIC_BASE_URL must be an absolute URL")

    return StorageConfig(
        bucket=bucket,
        endpoint_url=endpoint_url,
        region=(settings.storage_region or "").strip() or None,
        access_key=access_key,
        secret_key=secret_key,
        public_base_url=public_base_url.rstrip("/"),
    )


def _extension(filename: str | None) -> str:
    extension = Path(filename or "").suffix.lower()
    if extension and not re.fullmatch(r"\.[A-Za-z0-9]{1,10}", extension):
        return ""
    return extension


def _timestamp_ms(now: datetime | None = None) -> int:
    return int((now or datetime.now(timezone.utc)).timestamp() * 1000)


def post_image_key(user_id: UUID, filename: str | None, *, now: datetime | None = None) -> str:
    """``posts/<user>/<ms>-<suffix>.<ext>``; the suffix keeps same-millisecond uploads apart."""

    return f"posts/{user_id}/{_timestamp_ms(now)}-{uuid.uuid4().hex[:8]}{_extension(filename)}"


def avatar_key(user_id: UUID, filename: str | None, *, now: datetime | None = None) -> str:
    return f"avatars/{user_id}-{_timestamp_ms(now)}{_extension(filename)}"


class ImageStore:
    """Uploads and deletes public objects in a single bucket."""

    def __init__(self, client: BaseClient, config: StorageConfig) -> None:
        self._client = client
        self._config = config

    def public_url(self, key: str) -> str:
        return f"{self._config.public_base_url}/{key.lstrip('/')}"

    def key_for_url(self, url: str) -> str | None:
        prefix = f"{self._config.public_base_url}/"
        if not url.startswith(prefix):
            return None
        return url[len(prefix):] or None

    async def upload(self, file: UploadFile, *, key: str) -> StoredObject:
        content_type = (file.content_type or "application/octet-stream").strip() or "application/octet-stream"
        file_obj = getattr(file, "file", None)
        if file_obj is None:
            raise StorageUploadError("UploadFile is missing an underlying file buffer.")

        def _upload() -> None:
            try:
                file_obj.seek(0)
                self._client.upload_fileobj(
                    file_obj,
                    self._config.bucket,
                    key,
                    ExtraArgs={"ACL": "public-read", "ContentType": content_type},
                )
            except (ClientError, BotoCoreError) as exc:  # pragma: no cover - network bound
                logger.exception("Upload of %s failed", key)
                raise StorageUploadError("Upload to object storage failed") from exc

        await run_in_threadpool(_upload)
        return StoredObject(key=key, url=self.public_url(key), content_type=content_type)

    async def delete_url(self, url: str) -> None:
        """Remove the object behind ``url``; URLs outside this bucket are ignored."""

        key = self.key_for_url(url)
        if key is None:
            logger.warning("Not deleting %s: outside the configured bucket", url)
            return

        def _delete() -> None:
            try:
                self._client.delete_object(Bucket=self._config.bucket, Key=key)
            except (ClientError, BotoCoreError) as exc:  # pragma: no cover - network bound
                logger.exception("Failed to delete storage object %s", key)
                raise StorageDeletionError("Unable to delete image from storage") from exc

        await run_in_threadpool(_delete)


@lru_cache(maxsize=1)
def get_image_store() -> ImageStore:
    """FastAPI dependency returning the process-wide :class:`ImageStore`."""

    config = load_storage_config()
    client = Session().client(
        "s3",
        region_name=config.region,
        endpoint_url=config.endpoint_url,
        aws_access_key_id=config.access_key,
        aws_secret_access_key=config.secret_key,
    )
    return ImageStore(client, config)


__all__ = [
    "ImageStore",
    "StorageConfig",
    "StorageConfigurationError",
    "StorageDeletionError",
    "StorageUploadError",
    "StoredObject",
    "avatar_key",
    "get_image_store",
    "load_storage_config",
    "post_image_key",
]
