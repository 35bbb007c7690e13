"""Domain models for users — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    id: str
    email: str
    name: str
    created_at: datetime


@dataclass
class UserCredentials:
    """Row needed to check a login; never leaves the service layer."""

    id: str
    email: str
    name: str
    password_hash: str
    created_at: datetime

    def to_user(self) -> User:
        return User(id=self.id, email=self.email, name=self.name, created_at=self.created_at)
