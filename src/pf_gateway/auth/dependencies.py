"""FastAPI dependency: get_current_user.

Access tokens are validated statelessly (signature, expiry and type only,
no database or Redis lookup). A deleted user keeps a working access token
until it expires (at most JWT_ACCESS_EXPIRE_MINUTES).

Usage in any protected router:
    from src.pf_gateway.auth.dependencies import AuthenticatedUser, get_current_user

    @router.get("/protected")
    async def protected(user: AuthenticatedUser = Depends(get_current_user)):
        ...
"""

from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from config.settings import settings
from src.pf_common.errors import InvalidAccessTokenError
from src.pf_gateway.auth.cookies import ACCESS_COOKIE
from src.pf_gateway.auth.jwt_handler import decode_token

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button)
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login",
    auto_error=False,
)


@dataclass(frozen=True)
class AuthenticatedUser:
    user_id: str


async def get_current_user(
    request: Request,
    bearer: str | None = Depends(oauth2_scheme),
) -> AuthenticatedUser:
    """Read the access token from the cookie, else the Bearer header.

    Raises InvalidAccessTokenError (401) if missing, invalid, or expired.
    """
    token = request.cookies.get(ACCESS_COOKIE) or bearer
    if not token:
        raise InvalidAccessTokenError()
    payload = decode_token(token, expected_type="access")
    return AuthenticatedUser(user_id=str(payload["sub"]))
