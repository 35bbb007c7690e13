"""JWT token creation and verification.

HS256 with one shared JWT_SECRET. Two token types:

  access   sub, type, iat, exp         short-lived, stateless, never revoked
  refresh  sub, type, iat, exp, jti    long-lived; only valid while the
                                       Redis record user:{sub}:refresh:{jti}
                                       exists (see SessionService)

The `type` claim is strictly enforced to prevent token type confusion.
"""

import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from config.settings import settings
from src.pf_common.errors import InvalidAccessTokenError, InvalidRefreshTokenError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_ACCESS_EXPIRE_MINUTES)
_REFRESH_EXPIRE = timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS)

ACCESS_TTL_SECONDS = int(_ACCESS_EXPIRE.total_seconds())
REFRESH_TTL_SECONDS = int(_REFRESH_EXPIRE.total_seconds())


def new_token_id() -> str:
    """Fresh jti for a refresh token."""
    return uuid.uuid4().hex


def create_access_token(user_id: str) -> str:
    """Issue a short-lived access token (default: 15 min)."""
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "type": "access",
        "iat": now,
        "exp": now + _ACCESS_EXPIRE,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def create_refresh_token(user_id: str, jti: str) -> str:
    """Issue a long-lived refresh token (default: 7 days) bound to jti."""
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "type": "refresh",
        "jti": jti,
        "iat": now,
        "exp": now + _REFRESH_EXPIRE,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_token(token: str, expected_type: str) -> dict[str, Any]:
    """Decode and validate a JWT token.

    Args:
        token: Raw JWT string.
        expected_type: "access" or "refresh".

    Returns:
        Decoded payload; "sub" is always present, "jti" too for refresh tokens.

    Raises:
        InvalidAccessTokenError: Token invalid/expired and expected_type="access".
        InvalidRefreshTokenError: Token invalid/expired and expected_type="refresh".
    """
    payload: dict[str, Any] = {}
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        _raise_auth_error(expected_type)

    if payload.get("type") != expected_type or not payload.get("sub"):
        _raise_auth_error(expected_type)
    if expected_type == "refresh" and not payload.get("jti"):
        _raise_auth_error(expected_type)

    return payload


def _raise_auth_error(expected_type: str) -> None:
    if expected_type == "access":
        raise InvalidAccessTokenError()
    raise InvalidRefreshTokenError()
