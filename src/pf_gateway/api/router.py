"""Auth API router: register, login, refresh, revoke, me.

Every successful register/login/refresh sets both auth cookies and also
returns the tokens in the body for non-browser clients.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.pf_common.database import get_db_session
from src.pf_common.errors import InvalidRefreshTokenError, SessionUserNotFoundError
from src.pf_common.kv_store import KeyValueStore, get_kv_store
from src.pf_common.response import ApiResponse, success_response
from src.pf_gateway.auth.cookies import REFRESH_COOKIE, clear_auth_cookies, set_auth_cookies
from src.pf_gateway.auth.dependencies import AuthenticatedUser, get_current_user
from src.pf_gateway.session.service import SessionService, TokenPair
from src.pf_gateway.user.models import User
from src.pf_gateway.user.persistence import UserRepository
from src.pf_gateway.user.schemas import (
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    UserInfo,
)
from src.pf_gateway.user.service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])
_repo = UserRepository()
_sessions = SessionService(_repo)
_service = UserService(_repo, _sessions)


def _auth_payload(response: Response, user: User, tokens: TokenPair) -> dict:
    set_auth_cookies(response, tokens.access_token, tokens.refresh_token)
    return AuthResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        user=UserInfo.from_domain(user),
    ).model_dump()


def _presented_refresh_token(request: Request, body: RefreshRequest | None) -> str:
    token = request.cookies.get(REFRESH_COOKIE)
    if not token and body is not None:
        token = body.refresh_token
    if not token:
        raise InvalidRefreshTokenError()
    return token


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="User registration",
)
async def register(
    request: Request,
    response: Response,
    body: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    kv: Annotated[KeyValueStore, Depends(get_kv_store)],
) -> ApiResponse:
    user, tokens = await _service.register(db, kv, body.name, body.email, body.password)
    return success_response(
        _auth_payload(response, user, tokens), request, "User registered successfully"
    )


@router.post("/login", response_model=ApiResponse, summary="User login")
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    kv: Annotated[KeyValueStore, Depends(get_kv_store)],
) -> ApiResponse:
    user, tokens = await _service.login(db, kv, body.email, body.password)
    return success_response(_auth_payload(response, user, tokens), request, "Login successful")


@router.post("/refresh", response_model=ApiResponse, summary="Rotate refresh token")
async def refresh(
    request: Request,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    kv: Annotated[KeyValueStore, Depends(get_kv_store)],
    body: RefreshRequest | None = None,
) -> ApiResponse:
    token = _presented_refresh_token(request, body)
    user, tokens = await _sessions.rotate(db, kv, token)
    return success_response(_auth_payload(response, user, tokens), request, "Token refreshed")


@router.post("/refresh/revoke", response_model=ApiResponse, summary="Logout")
async def revoke(
    request: Request,
    response: Response,
    kv: Annotated[KeyValueStore, Depends(get_kv_store)],
    body: RefreshRequest | None = None,
) -> ApiResponse:
    token = request.cookies.get(REFRESH_COOKIE) or (body.refresh_token if body else None)
    revoked = await _sessions.revoke(kv, token) if token else False
    clear_auth_cookies(response)
    return success_response({"revoked": revoked}, request, "Logged out")


@router.get("/me", response_model=ApiResponse, summary="Current user")
async def me(
    request: Request,
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    user = await _repo.get_user_by_id(db, current_user.user_id)
    if user is None:
        raise SessionUserNotFoundError()
    return success_response(UserInfo.from_domain(user).model_dump(), request)
