"""gl_balance REST endpoints (read-only).

GET /groups/{group_id}/balances           - balance report + settlement plan
GET /groups/{group_id}/balances/context   - report rendered as assistant context
GET /groups/{group_id}/summary            - group info, members, recent expenses
GET /users/{user_id}/dues                 - groups where the user still owes money
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.gl_balance.application.service import GroupBalanceService
from src.gl_common.database import get_db_session
from src.gl_common.response import ApiResponse, success_response

router = APIRouter(tags=["balances"])

_service = GroupBalanceService()


@router.get("/groups/{group_id}/balances")
async def get_group_balances(
    group_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.compute_report(db, group_id)
    return success_response(result.model_dump(), getattr(request.state, "request_id", None))


@router.get("/groups/{group_id}/balances/context")
async def get_balance_context(
    group_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.build_balance_context(db, group_id)
    return success_response(result.model_dump(), getattr(request.state, "request_id", None))


@router.get("/groups/{group_id}/summary")
async def get_group_summary(
    group_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_group_summary(db, group_id)
    return success_response(result.model_dump(), getattr(request.state, "request_id", None))


@router.get("/users/{user_id}/dues")
async def get_user_dues(
    user_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_user_dues(db, user_id)
    return success_response(result.model_dump(), getattr(request.state, "request_id", None))
