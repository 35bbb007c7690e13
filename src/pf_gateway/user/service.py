"""User domain service: register, login.

Validation runs before any store call. The caller owns the session; this
service commits register itself because the refresh record has to be
written between the INSERT and the COMMIT.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pf_common.errors import (
    InvalidCredentialsError,
    InvalidNameError,
    PasswordRequiredError,
    PasswordTooLongError,
    WeakPasswordError,
)
from src.pf_common.kv_store import KeyValueStore
from src.pf_gateway.auth.password import (
    MAX_PASSWORD_BYTES,
    dummy_verify,
    hash_password,
    password_too_long,
    verify_password,
)
from src.pf_gateway.auth.password_strength import score_password
from src.pf_gateway.session.service import SessionService, TokenPair
from src.pf_gateway.user.models import User
from src.pf_gateway.user.persistence import UserRepository
from src.pf_gateway.user.repository import UserRepositoryProtocol

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 100


def validate_registration(name: str, email: str, password: str) -> None:
    if not name:
        raise InvalidNameError("Name is required")
    if len(name) < NAME_MIN_LENGTH:
        raise InvalidNameError(f"Name must be at least {NAME_MIN_LENGTH} characters")
    if len(name) > NAME_MAX_LENGTH:
        raise InvalidNameError(f"Name must be at most {NAME_MAX_LENGTH} characters")
    if not password:
        raise PasswordRequiredError()
    if password_too_long(password):
        raise PasswordTooLongError(MAX_PASSWORD_BYTES)
    local_part = email.split("@", 1)[0]
    if score_password(password, (name, email, local_part)) < settings.PASSWORD_MIN_SCORE:
        raise WeakPasswordError()


class UserService:
    """Stateless service — instantiate once, reuse across requests."""

    def __init__(
        self,
        repo: UserRepositoryProtocol | None = None,
        sessions: SessionService | None = None,
    ) -> None:
        self._repo: UserRepositoryProtocol = repo or UserRepository()
        self._sessions = sessions or SessionService(self._repo)

    async def register(
        self,
        db: AsyncSession,
        kv: KeyValueStore,
        name: str,
        email: str,
        password: str,
    ) -> tuple[User, TokenPair]:
        """Insert the user, record the first refresh token, then commit.

        A key-value failure while recording the token rolls the INSERT back.
        """
        name = name.strip()
        email = email.strip().lower()
        validate_registration(name, email, password)

        try:
            user = await self._repo.insert_user(db, email, name, hash_password(password))
            tokens = await self._sessions.issue(kv, user.id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return user, tokens

    async def login(
        self,
        db: AsyncSession,
        kv: KeyValueStore,
        email: str,
        password: str,
    ) -> tuple[User, TokenPair]:
        """Authenticate and open a new refresh lineage.

        "Unknown e-mail" and "wrong password" both raise InvalidCredentialsError
        to prevent account enumeration.
        """
        if not password:
            raise PasswordRequiredError()
        if password_too_long(password):
            raise InvalidCredentialsError()

        creds = await self._repo.get_credentials_by_email(db, email.strip().lower())
        if creds is None:
            dummy_verify(password)
            raise InvalidCredentialsError()
        if not verify_password(password, creds.password_hash):
            raise InvalidCredentialsError()

        tokens = await self._sessions.issue(kv, creds.id)
        return creds.to_user(), tokens
