"""UserRepository — concrete implementation of UserRepositoryProtocol.

All queries use raw text() SQL (no ORM). Unique-violation on the e-mail
column is translated to DuplicateEmailError here, closest to the failing
statement; every other database error propagates unchanged.
"""

import uuid

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.pf_common.database import UNIQUE_VIOLATION, constraint_code
from src.pf_common.errors import DuplicateEmailError
from src.pf_gateway.user.models import User, UserCredentials

_INSERT_USER_SQL = text("""
    INSERT INTO users (email, name, password_hash)
    VALUES (:email, :name, :password_hash)
    RETURNING id, email, name, created_at
""")

_GET_CREDENTIALS_BY_EMAIL_SQL = text("""
    SELECT id, email, name, password_hash, created_at
    FROM users
    WHERE email = :email
""")

_GET_USER_BY_ID_SQL = text("""
    SELECT id, email, name, created_at
    FROM users
    WHERE id = :user_id
""")


def _row_to_user(row: object) -> User:
    return User(
        id=str(row.id),  # type: ignore[attr-defined]
        email=row.email,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class UserRepository:
    async def insert_user(
        self, db: AsyncSession, email: str, name: str, password_hash: str
    ) -> User:
        try:
            result = await db.execute(
                _INSERT_USER_SQL,
                {"email": email, "name": name, "password_hash": password_hash},
            )
        except IntegrityError as e:
            if constraint_code(e) == UNIQUE_VIOLATION:
                raise DuplicateEmailError() from e
            raise
        return _row_to_user(result.one())

    async def get_credentials_by_email(
        self, db: AsyncSession, email: str
    ) -> UserCredentials | None:
        result = await db.execute(_GET_CREDENTIALS_BY_EMAIL_SQL, {"email": email})
        row = result.fetchone()
        if row is None:
            return None
        return UserCredentials(
            id=str(row.id),
            email=row.email,
            name=row.name,
            password_hash=row.password_hash,
            created_at=row.created_at,
        )

    async def get_user_by_id(self, db: AsyncSession, user_id: str) -> User | None:
        try:
            uuid.UUID(user_id)
        except ValueError:
            return None
        result = await db.execute(_GET_USER_BY_ID_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_user(row) if row is not None else None
