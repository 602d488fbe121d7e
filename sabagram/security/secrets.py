"""Utilities for loading sensitive configuration without leaking values."""
from __future__ import annotations

import hmac
import os
from typing import Final

__all__ = ["MissingSecretError", "require_secret", "is_placeholder", "secrets_match"]


class MissingSecretError(RuntimeError):
    """Raised when a required secret environment variable is not set."""


_PLACEHOLDER_VALUES: Final[set[str]] = {
    "changeme",
    "change-me",
    "placeholder",
    "placeholder-key",
    "example",
    "sample",
    "your-key-here",
}


def is_placeholder(value: str | None) -> bool:
    if not value:
        return True
    normalized = value.strip().lower()
    return not normalized or normalized in _PLACEHOLDER_VALUES


def require_secret(name: str) -> str:
    """Return a trimmed secret value or raise :class:`MissingSecretError`."""

    value = os.getenv(name)
    if is_placeholder(value):
        raise MissingSecretError(f"Environment variable {name} is required and must not use placeholder defaults")
    return value.strip()


def secrets_match(provided: str | None, expected: str) -> bool:
    """Constant-time comparison of a caller-supplied secret."""

    if not provided:
        return False
    return hmac.compare_digest(provided.strip().encode("utf-8"), expected.encode("utf-8"))
