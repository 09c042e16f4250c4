"""HTTP-level checks that need neither PostgreSQL nor Redis.

Errors raised before any store access must still come back in the
ApiResponse envelope.
"""

from httpx import AsyncClient


async def test_health(client: AsyncClient) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


async def test_balance_requires_session(client: AsyncClient) -> None:
    resp = await client.get("/api/v1/account/balance")
    assert resp.status_code == 401
    body = resp.json()
    assert body["code"] == 1001
    assert body["data"] is None
    assert body["request_id"] == resp.headers["X-Request-ID"]


async def test_place_trade_requires_session(client: AsyncClient) -> None:
    resp = await client.post(
        "/api/v1/rpc/place_trade",
        json={"p_market_id": "MKT-1", "p_side": "yes", "p_shares": 1},
    )
    assert resp.status_code == 401


async def test_garbage_bearer_token(client: AsyncClient) -> None:
    resp = await client.get(
        "/api/v1/positions", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert resp.status_code == 401
    assert resp.json()["code"] == 1001


async def test_admin_route_requires_session(client: AsyncClient) -> None:
    resp = await client.post(
        "/api/v1/rpc/resolve_market",
        json={"p_market_id": "MKT-1", "p_outcome": "resolved_yes"},
    )
    assert resp.status_code == 401


async def test_invalid_email_is_invalid_argument(client: AsyncClient) -> None:
    resp = await client.post("/api/v1/auth/magic-link", json={"email": "not-an-email"})
    assert resp.status_code == 422
    body = resp.json()
    assert body["code"] == 4001
    assert body["message"].startswith("Invalid argument")
