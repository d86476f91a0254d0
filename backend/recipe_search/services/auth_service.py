"""JWT authentication for the recipe search API.

Tokens are issued by the account service; this module only needs to
create them (tests, tooling) and verify them. Search does not require
authentication: :func:`get_current_user_optional` resolves the caller when a
valid bearer token is present and returns ``None`` otherwise.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from recipe_search.config import Settings, get_settings

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

ACCESS_TOKEN_TYPE = "access"


def create_access_token(
    user_id: str,
    username: str | None = None,
    *,
    expires_delta: timedelta | None = None,
    settings: Settings | None = None,
) -> str:
    """Issue an access token for ``user_id``.

    The username travels in ``sub`` and is left out when not given, since
    ``sub`` must be a string to verify. The token expires after
    ``JWT_ACCESS_TOKEN_EXPIRE_MINUTES`` unless ``expires_delta`` is given.
    """
    settings = settings or get_settings()
    lifetime = expires_delta if expires_delta is not None else timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)

    claims = {
        "user_id": user_id,
        "type": ACCESS_TOKEN_TYPE,
        "exp": datetime.now(UTC) + lifetime,
    }
    if username is not None:
        claims["sub"] = username
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str, *, settings: Settings | None = None) -> dict:
    """Return the claims of a signed, unexpired token.

    Raises:
        JWTError: If the signature or expiry check fails.
    """
    settings = settings or get_settings()
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])


async def get_current_user_optional(
    token: str | None = Depends(oauth2_scheme),
) -> dict | None:
    """FastAPI dependency resolving the caller from an optional Bearer token.

    Returns a dict with ``user_id`` and ``username`` for a valid access
    token, or ``None`` for anonymous callers. Invalid, expired and
    non-access tokens are treated as anonymous.
    """
    if not token:
        return None

    try:
        claims = verify_token(token)
    except JWTError:
        logger.debug("Ignoring invalid bearer token on optional-auth route")
        return None

    user_id = claims.get("user_id")
    if claims.get("type") != ACCESS_TOKEN_TYPE or user_id is None:
        return None

    return {"user_id": str(user_id), "username": claims.get("sub")}
