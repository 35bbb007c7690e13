"""Auth cookies set on every successful register/login/refresh.

  access_token   HttpOnly, SameSite=Strict, path "/",             access TTL
  refresh_token  HttpOnly, SameSite=Strict, path ".../auth/refresh", refresh TTL

The refresh cookie is scoped to the refresh path (which also covers
".../auth/refresh/revoke"), so browsers never attach it to ordinary calls.
"""

from starlette.responses import Response

from config.settings import settings
from src.pf_gateway.auth.jwt_handler import ACCESS_TTL_SECONDS, REFRESH_TTL_SECONDS

ACCESS_COOKIE = "access_token"
REFRESH_COOKIE = "refresh_token"


def set_auth_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    response.set_cookie(
        ACCESS_COOKIE,
        access_token,
        max_age=ACCESS_TTL_SECONDS,
        path="/",
        secure=settings.COOKIE_SECURE,
        httponly=True,
        samesite="strict",
    )
    response.set_cookie(
        REFRESH_COOKIE,
        refresh_token,
        max_age=REFRESH_TTL_SECONDS,
        path=settings.refresh_cookie_path,
        secure=settings.COOKIE_SECURE,
        httponly=True,
        samesite="strict",
    )


def clear_auth_cookies(response: Response) -> None:
    response.delete_cookie(
        ACCESS_COOKIE, path="/", secure=settings.COOKIE_SECURE, httponly=True, samesite="strict"
    )
    response.delete_cookie(
        REFRESH_COOKIE,
        path=settings.refresh_cookie_path,
        secure=settings.COOKIE_SECURE,
        httponly=True,
        samesite="strict",
    )
