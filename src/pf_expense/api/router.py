"""pf_expense REST API — 7 endpoints, all require authentication.

Read endpoints include a `cached` flag telling whether the payload came
from Redis.
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.pf_common.database import get_db_session
from src.pf_common.kv_store import KeyValueStore, get_kv_store
from src.pf_common.response import ApiResponse, success_response
from src.pf_expense.application.schemas import ExpenseRequest
from src.pf_expense.application.service import ExpenseApplicationService
from src.pf_gateway.auth.dependencies import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/expenses", tags=["expenses"])

_service = ExpenseApplicationService()

CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Kv = Annotated[KeyValueStore, Depends(get_kv_store)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_expense(
    body: ExpenseRequest,
    current_user: CurrentUser,
    db: DbSession,
    kv: Kv,
    request: Request,
) -> ApiResponse:
    data = await _service.add_expense(db, kv, current_user.user_id, body)
    return success_response(data.model_dump(mode="json"), request)


@router.get("")
async def list_expenses(
    current_user: CurrentUser,
    db: DbSession,
    kv: Kv,
    request: Request,
    page: int = Query(1, ge=1, description="1-based page number"),
) -> ApiResponse:
    result = await _service.list_expenses(db, kv, current_user.user_id, page)
    return success_response(result.to_payload(), request)


@router.get("/total")
async def get_total(
    current_user: CurrentUser,
    db: DbSession,
    kv: Kv,
    request: Request,
) -> ApiResponse:
    result = await _service.get_total(db, kv, current_user.user_id)
    return success_response(result.to_payload(), request)


@router.get("/category/{category_id}")
async def filter_by_category(
    category_id: uuid.UUID,
    current_user: CurrentUser,
    db: DbSession,
    kv: Kv,
    request: Request,
    page: int = Query(1, ge=1, description="1-based page number"),
) -> ApiResponse:
    result = await _service.filter_by_category(
        db, kv, current_user.user_id, str(category_id), page
    )
    return success_response(result.to_payload(), request)


@router.get("/{expense_id}")
async def get_expense(
    expense_id: uuid.UUID,
    current_user: CurrentUser,
    db: DbSession,
    kv: Kv,
    request: Request,
) -> ApiResponse:
    result = await _service.get_expense(db, kv, current_user.user_id, str(expense_id))
    return success_response(result.to_payload(), request)


@router.put("/{expense_id}")
async def edit_expense(
    expense_id: uuid.UUID,
    body: ExpenseRequest,
    current_user: CurrentUser,
    db: DbSession,
    kv: Kv,
    request: Request,
) -> ApiResponse:
    data = await _service.edit_expense(db, kv, current_user.user_id, str(expense_id), body)
    return success_response(data.model_dump(mode="json"), request)


@router.delete("/{expense_id}")
async def delete_expense(
    expense_id: uuid.UUID,
    current_user: CurrentUser,
    db: DbSession,
    kv: Kv,
    request: Request,
) -> ApiResponse:
    data = await _service.delete_expense(db, kv, current_user.user_id, str(expense_id))
    return success_response(data.model_dump(), request, data.message)
