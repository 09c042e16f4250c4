# src/pm_admin/api/router.py
"""Admin REST API: every route is gated by require_admin."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_admin.application.schemas import ResolveMarketRpcRequest, ResolveRequest
from src.pm_admin.application.service import AdminService
from src.pm_common.database import get_db_session
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import require_admin
from src.pm_gateway.user.db_models import UserModel
from src.pm_market.application.schemas import CreateMarketRequest, UpdateMarketStatusRequest

router = APIRouter(prefix="/admin", tags=["admin"])
rpc_router = APIRouter(prefix="/rpc", tags=["admin"])
_service = AdminService()


@router.post("/markets", status_code=201)
async def create_market(
    body: CreateMarketRequest,
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    market = await _service.create_market(db, body)
    return success_response(market.model_dump(), request)


@router.patch("/markets/{market_id}/status")
async def update_market_status(
    market_id: str,
    body: UpdateMarketStatusRequest,
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    market = await _service.update_market_status(db, market_id, body.status)
    return success_response(market.model_dump(), request)


@router.post("/markets/{market_id}/resolve")
async def resolve_market(
    market_id: str,
    body: ResolveRequest,
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await _service.resolve_market(db, market_id, body.outcome)
    return success_response(result.model_dump(), request)


@router.get("/markets/{market_id}/stats")
async def get_market_stats(
    market_id: str,
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    stats = await _service.get_market_stats(db, market_id)
    return success_response(stats.model_dump(), request)


@rpc_router.post("/resolve_market")
async def resolve_market_rpc(
    body: ResolveMarketRpcRequest,
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await _service.resolve_market(db, body.p_market_id, body.p_outcome)
    return success_response(result.model_dump(), request)
