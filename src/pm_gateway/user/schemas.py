"""Pydantic request/response schemas for pm_gateway.

All responses are wrapped in ApiResponse at the router layer.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.pm_gateway.user.db_models import UserModel


class SignInLinkRequest(BaseModel):
    email: EmailStr


class SignInLinkResponse(BaseModel):
    email: str
    expires_in: int
    # Only populated when DEBUG is on; in production the link is delivered out of band
    sign_in_link: str | None = None


class VerifyLinkRequest(BaseModel):
    token: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str


class UserInfo(BaseModel):
    """Minimal user info embedded in responses."""

    user_id: str
    email: str
    username: str | None
    is_admin: bool


class SessionResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = 1800  # 30 minutes in seconds
    user: UserInfo


class RefreshResponse(BaseModel):
    access_token: str
    expires_in: int = 1800


class ProfileResponse(BaseModel):
    id: str
    email: str
    username: str | None
    created_at: str

    @classmethod
    def from_model(cls, user: UserModel) -> "ProfileResponse":
        return cls(
            id=str(user.id),
            email=user.email,
            username=user.username,
            created_at=user.created_at.isoformat(),
        )


class UpdateProfileRequest(BaseModel):
    # null or blank clears the username
    username: str | None = Field(
        None, min_length=3, max_length=64, pattern=r"^[a-zA-Z0-9_]+$"
    )

    @field_validator("username", mode="before")
    @classmethod
    def blank_is_null(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v
