"""Pydantic schemas for pm_market API requests and responses.

Cursor format for markets (VARCHAR PK, not sequential):
  {"ts": "<created_at ISO>", "id": "<market_id>"}
  Encoded as Base64 JSON string.
"""

import base64
import json
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from src.pm_common.cents import price_to_display, validate_price
from src.pm_common.datetime_utils import to_iso
from src.pm_market.domain.models import Market, NewMarket

# ---------------------------------------------------------------------------
# Cursor utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_market: Market) -> str:
    """Encode composite cursor from last market in page."""
    payload = {
        "ts": last_market.created_at.isoformat(),
        "id": last_market.id,
    }
    return base64.b64encode(json.dumps(payload).encode()).decode()


def cursor_decode(cursor: str | None) -> tuple[str | None, str | None]:
    """Decode composite cursor -> (ts_iso, market_id), or (None, None) on error."""
    if cursor is None:
        return None, None
    try:
        data = json.loads(base64.b64decode(cursor.encode()).decode())
        datetime.fromisoformat(data["ts"])
        return data["ts"], str(data["id"])
    except (ValueError, KeyError, TypeError):
        return None, None


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


def _blank_to_none(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    return v or None


class CreateMarketRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = None
    category: str | None = Field(None, max_length=64)
    closes_at: datetime | None = None
    yes_price: int = 55
    no_price: int = 45

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title must not be blank")
        return v

    @field_validator("description", "category")
    @classmethod
    def blank_is_null(cls, v: str | None) -> str | None:
        return _blank_to_none(v)

    @field_validator("yes_price", "no_price")
    @classmethod
    def price_in_range(cls, v: int) -> int:
        validate_price(v)
        return v

    def to_domain(self) -> NewMarket:
        return NewMarket(
            title=self.title,
            description=self.description,
            category=self.category,
            closes_at=self.closes_at,
            yes_price=self.yes_price,
            no_price=self.no_price,
        )


class UpdateMarketStatusRequest(BaseModel):
    # open | closed; AdminService rejects anything else
    status: str = Field(..., min_length=1, max_length=16)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class MarketItem(BaseModel):
    id: str
    title: str
    description: str | None
    category: str | None
    closes_at: str | None
    status: str
    outcome: str | None
    yes_price: int
    yes_price_display: str
    no_price: int
    no_price_display: str
    resolved_at: str | None
    created_at: str

    @classmethod
    def from_domain(cls, m: Market) -> "MarketItem":
        return cls(
            id=m.id,
            title=m.title,
            description=m.description,
            category=m.category,
            closes_at=to_iso(m.closes_at),
            status=m.status,
            outcome=m.outcome,
            yes_price=m.yes_price,
            yes_price_display=price_to_display(m.yes_price),
            no_price=m.no_price,
            no_price_display=price_to_display(m.no_price),
            resolved_at=to_iso(m.resolved_at),
            created_at=m.created_at.isoformat(),
        )


class MarketListResponse(BaseModel):
    items: list[MarketItem]
    next_cursor: str | None
    has_more: bool


class CategoryListResponse(BaseModel):
    categories: list[str]
