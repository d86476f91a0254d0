"""Tests for JWT handling and the optional-auth dependency.

Covers:
- JWT token creation / verification
- Expired & tampered token rejection
- get_current_user_optional: anonymous, valid, invalid and non-access tokens
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from jose import JWTError, jwt

from recipe_search.config import Settings, get_settings
from recipe_search.services.auth_service import (
    create_access_token,
    get_current_user_optional,
    verify_token,
)


def _encode(claims: dict) -> str:
    """Sign arbitrary claims with the configured secret."""
    settings = get_settings()
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


# ---------------------------------------------------------------------------
# Token creation / verification
# ---------------------------------------------------------------------------


class TestCreateAccessToken:
    """Test create_access_token function."""

    def test_returns_string(self):
        token = create_access_token("user-1", "alice")
        assert isinstance(token, str)
        assert len(token) > 0

    def test_token_contains_claims(self):
        payload = verify_token(create_access_token("user-1", "alice"))
        assert payload["sub"] == "alice"
        assert payload["user_id"] == "user-1"
        assert payload["type"] == "access"
        assert "exp" in payload

    def test_token_without_username_verifies(self):
        payload = verify_token(create_access_token("user-1"))
        assert payload["user_id"] == "user-1"
        assert "sub" not in payload

    def test_default_lifetime_from_settings(self):
        payload = verify_token(create_access_token("user-1"))
        remaining = datetime.fromtimestamp(payload["exp"], UTC) - datetime.now(UTC)
        assert timedelta(minutes=29) < remaining <= timedelta(minutes=30)

    def test_custom_settings(self):
        """A token signed with one secret only verifies under that secret."""
        settings = Settings(JWT_SECRET="another-secret")
        token = create_access_token("user-2", "bob", settings=settings)

        assert verify_token(token, settings=settings)["sub"] == "bob"
        with pytest.raises(JWTError):
            verify_token(token)


class TestVerifyToken:
    def test_expired_token_rejected(self):
        token = create_access_token("user-1", expires_delta=timedelta(seconds=-1))
        with pytest.raises(JWTError):
            verify_token(token)

    def test_wrong_secret_rejected(self):
        token = jwt.encode({"sub": "alice", "user_id": "user-1"}, "some-other-secret", algorithm="HS256")
        with pytest.raises(JWTError):
            verify_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(JWTError):
            verify_token("not-a-jwt")


# ---------------------------------------------------------------------------
# get_current_user_optional
# ---------------------------------------------------------------------------


class TestGetCurrentUserOptional:
    @pytest.mark.asyncio
    async def test_no_token_is_anonymous(self):
        assert await get_current_user_optional(token=None) is None

    @pytest.mark.asyncio
    async def test_valid_token(self):
        user = await get_current_user_optional(token=create_access_token("user-1", "alice"))
        assert user == {"user_id": "user-1", "username": "alice"}

    @pytest.mark.asyncio
    async def test_token_without_username(self):
        user = await get_current_user_optional(token=create_access_token("user-1"))
        assert user == {"user_id": "user-1", "username": None}

    @pytest.mark.asyncio
    async def test_numeric_user_id_becomes_string(self):
        token = _encode({"sub": "alice", "user_id": 42, "type": "access"})
        user = await get_current_user_optional(token=token)
        assert user["user_id"] == "42"

    @pytest.mark.asyncio
    async def test_invalid_token_is_anonymous(self):
        assert await get_current_user_optional(token="not-a-jwt") is None

    @pytest.mark.asyncio
    async def test_expired_token_is_anonymous(self):
        token = create_access_token("user-1", "alice", expires_delta=timedelta(seconds=-1))
        assert await get_current_user_optional(token=token) is None

    @pytest.mark.asyncio
    async def test_refresh_token_is_anonymous(self):
        token = _encode({"sub": "alice", "user_id": "user-1", "type": "refresh"})
        assert await get_current_user_optional(token=token) is None

    @pytest.mark.asyncio
    async def test_missing_user_id_is_anonymous(self):
        token = _encode({"sub": "alice", "type": "access"})
        assert await get_current_user_optional(token=token) is None
