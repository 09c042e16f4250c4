"""Auth and profile API routers.

Auth:     request sign-in link, verify link, refresh access token.
Profile:  read the caller's profile row, update the caller's username.

All endpoints return ApiResponse. request_id is read from request.state
(injected by RequestLogMiddleware).
"""

from typing import Annotated

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pm_common.database import get_db_session
from src.pm_common.redis_client import get_redis
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.admin_gate import is_admin
from src.pm_gateway.auth.dependencies import get_current_user
from src.pm_gateway.user.db_models import UserModel
from src.pm_gateway.user.schemas import (
    ProfileResponse,
    RefreshRequest,
    RefreshResponse,
    SessionResponse,
    SignInLinkRequest,
    SignInLinkResponse,
    UpdateProfileRequest,
    UserInfo,
    VerifyLinkRequest,
)
from src.pm_gateway.user.service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])
profile_router = APIRouter(prefix="/profile", tags=["profile"])
_service = UserService()


@router.post(
    "/magic-link",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=ApiResponse,
    summary="Request a passwordless sign-in link",
)
async def request_magic_link(
    request: Request,
    body: SignInLinkRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    redis: Annotated[aioredis.Redis, Depends(get_redis)],
) -> ApiResponse:
    link = await _service.request_sign_in_link(body.email, db, redis)
    data = SignInLinkResponse(
        email=body.email.lower(),
        expires_in=settings.MAGIC_LINK_TTL_SECONDS,
        sign_in_link=link if settings.DEBUG else None,
    )
    resp = success_response(data.model_dump(), request)
    resp.message = "Check your email for the magic link to sign in."
    return resp


@router.post(
    "/verify",
    response_model=ApiResponse,
    summary="Exchange a sign-in link token for a session",
)
async def verify_magic_link(
    request: Request,
    body: VerifyLinkRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    redis: Annotated[aioredis.Redis, Depends(get_redis)],
) -> ApiResponse:
    user, access_token, refresh_token = await _service.verify_sign_in_link(
        body.token, db, redis
    )
    data = SessionResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
        user=UserInfo(
            user_id=str(user.id),
            email=user.email,
            username=user.username,
            is_admin=is_admin(user),
        ),
    )
    resp = success_response(data.model_dump(), request)
    resp.message = "Signed in"
    return resp


@router.post(
    "/refresh",
    response_model=ApiResponse,
    summary="Refresh access token",
)
async def refresh_token(
    request: Request,
    body: RefreshRequest,
) -> ApiResponse:
    new_access_token = await _service.refresh(body.refresh_token)
    data = RefreshResponse(
        access_token=new_access_token,
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
    )
    resp = success_response(data.model_dump(), request)
    resp.message = "Token refreshed"
    return resp


@profile_router.get("")
async def get_profile(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
) -> ApiResponse:
    data = ProfileResponse.from_model(current_user).model_dump()
    data["is_admin"] = is_admin(current_user)
    return success_response(data, request)


@profile_router.patch("")
async def update_profile(
    request: Request,
    body: UpdateProfileRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    user = await _service.update_username(current_user, body.username, db)
    return success_response(ProfileResponse.from_model(user).model_dump(), request)
