"""Unit tests for JWT handler."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from jose import jwt

from config.settings import settings
from src.pf_common.errors import InvalidAccessTokenError, InvalidRefreshTokenError
from src.pf_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
    new_token_id,
)


def test_access_token_contains_correct_claims() -> None:
    token = create_access_token("user-123")
    # Decode without verification to inspect claims
    payload = jwt.get_unverified_claims(token)
    assert payload["sub"] == "user-123"
    assert payload["type"] == "access"
    assert "jti" not in payload


def test_refresh_token_carries_jti() -> None:
    token = create_refresh_token("user-123", "abc")
    payload = jwt.get_unverified_claims(token)
    assert payload["sub"] == "user-123"
    assert payload["type"] == "refresh"
    assert payload["jti"] == "abc"


def test_token_ids_are_unique() -> None:
    assert len({new_token_id() for _ in range(100)}) == 100


def test_decode_valid_refresh_token() -> None:
    token = create_refresh_token("user-abc", "j1")
    payload = decode_token(token, expected_type="refresh")
    assert payload["sub"] == "user-abc"
    assert payload["jti"] == "j1"


def test_access_token_used_as_refresh_raises_error() -> None:
    """Using access token where refresh is expected must fail."""
    token = create_access_token("user-abc")
    with pytest.raises(InvalidRefreshTokenError):
        decode_token(token, expected_type="refresh")


def test_refresh_token_used_as_access_raises_error() -> None:
    token = create_refresh_token("user-abc", "j1")
    with pytest.raises(InvalidAccessTokenError):
        decode_token(token, expected_type="access")


def test_refresh_token_without_jti_is_rejected() -> None:
    token = jwt.encode(
        {"sub": "user-abc", "type": "refresh"}, settings.JWT_SECRET, algorithm="HS256"
    )
    with pytest.raises(InvalidRefreshTokenError):
        decode_token(token, expected_type="refresh")


def test_expired_access_token_raises_error() -> None:
    with patch(
        "src.pf_gateway.auth.jwt_handler._ACCESS_EXPIRE",
        timedelta(seconds=-1),
    ):
        token = create_access_token("user-abc")
    with pytest.raises(InvalidAccessTokenError):
        decode_token(token, expected_type="access")


def test_expired_refresh_token_raises_refresh_error() -> None:
    with patch(
        "src.pf_gateway.auth.jwt_handler._REFRESH_EXPIRE",
        timedelta(seconds=-1),
    ):
        token = create_refresh_token("user-abc", "j1")
    with pytest.raises(InvalidRefreshTokenError):
        decode_token(token, expected_type="refresh")


def test_token_signed_with_other_secret_is_rejected() -> None:
    token = jwt.encode(
        {"sub": "user-abc", "type": "refresh", "jti": "j1"}, "other-secret", algorithm="HS256"
    )
    with pytest.raises(InvalidRefreshTokenError):
        decode_token(token, expected_type="refresh")
