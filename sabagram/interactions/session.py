"""Explicit caller identity passed into every coordinator call."""
from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True, slots=True)
class AuthSession:
    """The signed-in account and the bearer token issued for it."""

    user_id: UUID
    access_token: str = field(default="", repr=False)

    def auth_headers(self) -> dict[str, str]:
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}


__all__ = ["AuthSession"]
