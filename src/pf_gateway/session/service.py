"""Refresh-token rotation engine.

A refresh token is valid only while its record user:{sub}:refresh:{jti}
exists in the key-value store; the signature is necessary but not
sufficient. Lifecycle of one jti:

  issued    record SET with the refresh TTL, token returned to the caller
  rotating  signature ok -> record exists -> user exists -> new pair issued
  consumed  record deleted in the same MULTI/EXEC that records the new jti

Replaying a consumed token finds no record and fails with
InvalidRefreshTokenError. Two concurrent rotations of the same token both
pass the EXISTS check, but only one DEL removes the record; the loser drops
the record it just created and fails the same way, so each jti is
exchanged at most once.

The new record is written in the same batch as the old one is deleted,
never after it: a transient failure must not strand a legitimate user with
zero valid refresh tokens.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from src.pf_common.errors import (
    InternalError,
    InvalidRefreshTokenError,
    SessionUserNotFoundError,
)
from src.pf_common.kv_store import KeyValueStore, KeyValueStoreError, KvBatch
from src.pf_gateway.auth.jwt_handler import (
    REFRESH_TTL_SECONDS,
    create_access_token,
    create_refresh_token,
    decode_token,
    new_token_id,
)
from src.pf_gateway.user.models import User
from src.pf_gateway.user.persistence import UserRepository
from src.pf_gateway.user.repository import UserRepositoryProtocol

logger = logging.getLogger(__name__)


def refresh_key(user_id: str, jti: str) -> str:
    return f"user:{user_id}:refresh:{jti}"


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    refresh_jti: str


class SessionService:
    """Stateless service — instantiate once, reuse across requests."""

    def __init__(self, repo: UserRepositoryProtocol | None = None) -> None:
        self._repo: UserRepositoryProtocol = repo or UserRepository()

    def _sign_pair(self, user_id: str, jti: str) -> TokenPair:
        return TokenPair(
            access_token=create_access_token(user_id),
            refresh_token=create_refresh_token(user_id, jti),
            refresh_jti=jti,
        )

    async def issue(self, kv: KeyValueStore, user_id: str) -> TokenPair:
        """Record a fresh jti, then sign the pair.

        Raises InternalError if the record cannot be written: an access token
        without a refresh record leaves the session unrenewable.
        """
        jti = new_token_id()
        try:
            await kv.set(refresh_key(user_id, jti), jti, REFRESH_TTL_SECONDS)
        except KeyValueStoreError as e:
            logger.error("Failed to record refresh token: user=%s", user_id, exc_info=True)
            raise InternalError() from e
        return self._sign_pair(user_id, jti)

    async def rotate(
        self, db: AsyncSession, kv: KeyValueStore, refresh_token: str
    ) -> tuple[User, TokenPair]:
        """Exchange a live refresh token for a new pair, consuming it."""
        payload = decode_token(refresh_token, expected_type="refresh")
        user_id = str(payload["sub"])
        old_key = refresh_key(user_id, str(payload["jti"]))

        try:
            live = await kv.exists(old_key)
        except KeyValueStoreError as e:
            logger.error("Refresh record lookup failed: user=%s", user_id, exc_info=True)
            raise InternalError() from e
        if not live:
            logger.warning("Refresh token expired or already consumed: user=%s", user_id)
            raise InvalidRefreshTokenError()

        user = await self._repo.get_user_by_id(db, user_id)
        if user is None:
            raise SessionUserNotFoundError()

        new_jti = new_token_id()
        new_key = refresh_key(user.id, new_jti)
        batch = KvBatch().set(new_key, new_jti, REFRESH_TTL_SECONDS).delete(old_key)
        try:
            _, consumed = await kv.batch(batch)
        except KeyValueStoreError as e:
            logger.error("Refresh rotation failed: user=%s", user_id, exc_info=True)
            raise InternalError() from e

        if consumed == 0:
            logger.warning("Concurrent refresh of the same token rejected: user=%s", user_id)
            try:
                await kv.delete(new_key)
            except KeyValueStoreError:
                # The orphan expires with the refresh TTL.
                logger.error("Failed to drop orphan refresh record: user=%s", user_id, exc_info=True)
            raise InvalidRefreshTokenError()

        return user, self._sign_pair(user.id, new_jti)

    async def revoke(self, kv: KeyValueStore, refresh_token: str) -> bool:
        """Consume a refresh token without issuing a new one (logout).

        Returns False when the token is invalid or its record is already gone.
        """
        try:
            payload = decode_token(refresh_token, expected_type="refresh")
        except InvalidRefreshTokenError:
            return False
        key = refresh_key(str(payload["sub"]), str(payload["jti"]))
        try:
            return await kv.delete(key) > 0
        except KeyValueStoreError as e:
            logger.error("Failed to revoke refresh token: user=%s", payload["sub"], exc_info=True)
            raise InternalError() from e
