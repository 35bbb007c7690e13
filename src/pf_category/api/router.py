"""pf_category REST API — 2 endpoints, both require authentication."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.pf_category.application.schemas import CreateCategoryRequest
from src.pf_category.application.service import CategoryApplicationService
from src.pf_common.database import get_db_session
from src.pf_common.kv_store import KeyValueStore, get_kv_store
from src.pf_common.response import ApiResponse, success_response
from src.pf_gateway.auth.dependencies import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/categories", tags=["categories"])

_service = CategoryApplicationService()


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_category(
    body: CreateCategoryRequest,
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    kv: Annotated[KeyValueStore, Depends(get_kv_store)],
    request: Request,
) -> ApiResponse:
    data = await _service.add_category(
        db, kv, current_user.user_id, body.name, body.description
    )
    return success_response(data.model_dump(), request)


@router.get("")
async def list_categories(
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    kv: Annotated[KeyValueStore, Depends(get_kv_store)],
    request: Request,
    page: int = Query(1, ge=1, description="1-based page number"),
) -> ApiResponse:
    result = await _service.list_categories(db, kv, current_user.user_id, page)
    return success_response(result.to_payload(), request)
