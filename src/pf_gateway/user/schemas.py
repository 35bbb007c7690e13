"""Pydantic request/response schemas for pf_gateway.

All responses are wrapped in ApiResponse at the router layer. Field shape
is checked here; semantic rules (name length, password strength) live in
UserService so they surface as specific error codes.
"""

from pydantic import BaseModel, EmailStr, Field

from src.pf_gateway.auth.jwt_handler import ACCESS_TTL_SECONDS
from src.pf_gateway.user.models import User


class RegisterRequest(BaseModel):
    name: str = Field(..., max_length=100)
    email: EmailStr = Field(..., max_length=254)
    password: str = Field(..., max_length=256)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., max_length=256)


class RefreshRequest(BaseModel):
    """Body fallback for clients that cannot send the refresh cookie."""

    refresh_token: str | None = None


class UserInfo(BaseModel):
    user_id: str
    email: str
    name: str
    created_at: str

    @classmethod
    def from_domain(cls, user: User) -> "UserInfo":
        return cls(
            user_id=user.id,
            email=user.email,
            name=user.name,
            created_at=user.created_at.isoformat(),
        )


class AuthResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = ACCESS_TTL_SECONDS
    user: UserInfo
