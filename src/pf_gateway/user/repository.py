"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pf_gateway.user.models import User, UserCredentials


class UserRepositoryProtocol(Protocol):
    async def insert_user(
        self, db: AsyncSession, email: str, name: str, password_hash: str
    ) -> User: ...

    async def get_credentials_by_email(
        self, db: AsyncSession, email: str
    ) -> UserCredentials | None: ...

    async def get_user_by_id(self, db: AsyncSession, user_id: str) -> User | None: ...
