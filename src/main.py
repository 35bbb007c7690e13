"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.pf_category.api.router import router as category_router
from src.pf_common.database import engine
from src.pf_common.errors import (
    AppError,
    InternalError,
    InvalidEmailError,
    MalformedRequestError,
)
from src.pf_common.kv_store import close_redis, get_redis
from src.pf_common.response import error_response
from src.pf_expense.api.router import router as expense_router
from src.pf_gateway.api.router import router as auth_router
from src.pf_gateway.middleware.request_log import RequestLogMiddleware

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis connections. Shutdown: dispose."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    redis = await get_redis()
    await redis.ping()
    yield
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


def _error_json(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, request)
    return JSONResponse(status_code=exc.http_status, content=resp.model_dump())


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error("Internal error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error_json(request, exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    if tuple(first.get("loc", ()))[-1:] == ("email",):
        return _error_json(request, InvalidEmailError())
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    detail = f"{field}: {first.get('msg', 'invalid value')}" if field else "Malformed request"
    return _error_json(request, MalformedRequestError(detail))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error_json(request, InternalError())


app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(category_router, prefix=settings.API_PREFIX)
app.include_router(expense_router, prefix=settings.API_PREFIX)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
