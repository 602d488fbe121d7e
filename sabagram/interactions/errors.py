"""Errors raised by the interaction coordinators and gateways.

Each error is scoped to one user action: the coordinator that raises it has
already put every collection it touched back to its pre-action state.
"""
from __future__ import annotations

from uuid import UUID


class InteractionError(Exception):
    """Base class for failures surfaced to the caller of a coordinator."""

    def __init__(self, message: str, *, post_id: UUID | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.post_id = post_id


class ValidationError(InteractionError):
    """Rejected locally before any network call (empty comment, missing post id)."""


class TransientGatewayError(InteractionError):
    """Network failure, timeout or server error; the user may retry."""


class PermissionDeniedError(InteractionError):
    """The store refused the write for this caller."""


class NotFoundError(InteractionError):
    """The post or like vanished before the write landed."""


class ToggleInFlightError(InteractionError):
    """A like toggle for the same post and user has not resolved yet."""


__all__ = [
    "InteractionError",
    "ValidationError",
    "TransientGatewayError",
    "PermissionDeniedError",
    "NotFoundError",
    "ToggleInFlightError",
]
