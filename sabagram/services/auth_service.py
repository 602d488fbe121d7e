"""Bearer-token verification and caller resolution.

Accounts live with the external identity provider, which issues HS256 JWTs
whose ``sub`` claim is the account id. This module only verifies those tokens
and maps them onto :class:`~sabagram.models.Profile` rows.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from ..config import get_settings
from ..constants import BANNED_DETAIL
from ..database import get_session
from ..models import Profile
from ..security.secrets import MissingSecretError, require_secret

logger = logging.getLogger(__name__)

_security = HTTPBearer(auto_error=False)

DEFAULT_TOKEN_MINUTES = 60


@lru_cache(maxsize=1)
def _get_jwt_secret() -> str:
    try:
        return require_secret("JWT_SECRET_KEY")
    except MissingSecretError as exc:
        raise RuntimeError(str(exc)) from exc


def create_access_token(subject: UUID, *, expires_minutes: Optional[int] = None) -> str:
    """Sign a token shaped like the identity provider's (used by tests and local tooling)."""

    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": str(subject),
        "exp": now + timedelta(minutes=expires_minutes or DEFAULT_TOKEN_MINUTES),
        "iat": now,
    }
    if settings.jwt_audience:
        payload["aud"] = settings.jwt_audience
    return jwt.encode(payload, _get_jwt_secret(), algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> UUID:
    """Decode and validate a JWT, returning the embedded subject UUID."""

    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            _get_jwt_secret(),
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options={"verify_aud": bool(settings.jwt_audience)},
        )
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc

    subject = payload.get("sub")
    if not subject:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    try:
        return UUID(subject)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload") from exc


async def get_current_account_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(_security),
) -> UUID:
    """Return the verified account id, whether or not a profile exists yet."""

    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    return decode_access_token(credentials.credentials)


async def get_current_user(
    account_id: UUID = Depends(get_current_account_id),
    db: Session = Depends(get_session),
) -> Profile:
    """Resolve the caller's profile from the provided bearer token."""

    profile = db.get(Profile, account_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found. Please log in again.")
    return profile


async def require_active_user(user: Profile = Depends(get_current_user)) -> Profile:
    """Reject banned callers on mutating routes."""

    if user.banned:
        logger.info("Rejected request from banned profile %s", user.id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=BANNED_DETAIL)
    return user


__all__ = [
    "create_access_token",
    "decode_access_token",
    "get_current_account_id",
    "get_current_user",
    "require_active_user",
]
