"""pm_trade REST API: place_trade RPC and the caller's trade history."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.database import get_db_session
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_current_user
from src.pm_gateway.user.db_models import UserModel
from src.pm_trade.application.engine import TradeEngine
from src.pm_trade.application.schemas import PlaceTradeRequest
from src.pm_trade.application.service import TradeQueryService

router = APIRouter(tags=["trades"])

_engine = TradeEngine()
_queries = TradeQueryService()


@router.post("/rpc/place_trade")
async def place_trade(
    body: PlaceTradeRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _engine.place_trade(
        db, str(current_user.id), body.p_market_id, body.p_side, body.p_shares
    )
    return success_response(data.model_dump(), request)


@router.get("/trades")
async def list_trades(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    market_id: str | None = Query(None, description="Filter by market ID"),
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
) -> ApiResponse:
    data = await _queries.list_trades(db, str(current_user.id), market_id, cursor, limit)
    return success_response(data.model_dump(), request)
