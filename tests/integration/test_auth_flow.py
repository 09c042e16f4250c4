"""Integration tests for sign-in and profile (requires running PG + Redis)."""

import uuid

import pytest
from httpx import AsyncClient

from tests.integration.helpers import bearer, sign_in

pytestmark = pytest.mark.asyncio(loop_scope="session")


class TestSignIn:
    async def test_link_is_single_use(self, client: AsyncClient) -> None:
        email = f"once_{uuid.uuid4().hex[:8]}@example.com"
        resp = await client.post("/api/v1/auth/magic-link", json={"email": email})
        token = resp.json()["data"]["sign_in_link"].split("token=", 1)[1]

        first = await client.post("/api/v1/auth/verify", json={"token": token})
        second = await client.post("/api/v1/auth/verify", json={"token": token})

        assert first.status_code == 200
        assert second.status_code == 401
        assert second.json()["code"] == 1003

    async def test_email_normalised(self, client: AsyncClient) -> None:
        local = f"Mixed_{uuid.uuid4().hex[:8]}"
        token = await sign_in(client, f"{local}@Example.COM")
        resp = await client.get("/api/v1/profile", headers=bearer(token))
        assert resp.json()["data"]["email"] == f"{local.lower()}@example.com"

    async def test_refresh(self, client: AsyncClient) -> None:
        email = f"refresh_{uuid.uuid4().hex[:8]}@example.com"
        resp = await client.post("/api/v1/auth/magic-link", json={"email": email})
        token = resp.json()["data"]["sign_in_link"].split("token=", 1)[1]
        session = (await client.post("/api/v1/auth/verify", json={"token": token})).json()["data"]

        resp = await client.post(
            "/api/v1/auth/refresh", json={"refresh_token": session["refresh_token"]}
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["access_token"]


class TestProfile:
    async def test_new_user_profile_and_balance(self, client: AsyncClient) -> None:
        token = await sign_in(client)

        profile = (await client.get("/api/v1/profile", headers=bearer(token))).json()["data"]
        assert profile["username"] is None
        assert profile["is_admin"] is False

        balance = (await client.get("/api/v1/account/balance", headers=bearer(token))).json()
        assert balance["data"]["play_cash_balance_cents"] == 100_000

    async def test_update_username(self, client: AsyncClient) -> None:
        token = await sign_in(client)
        name = f"user_{uuid.uuid4().hex[:8]}"

        resp = await client.patch(
            "/api/v1/profile", json={"username": name}, headers=bearer(token)
        )

        assert resp.status_code == 200
        assert resp.json()["data"]["username"] == name

    async def test_bad_username_rejected(self, client: AsyncClient) -> None:
        token = await sign_in(client)
        resp = await client.patch(
            "/api/v1/profile", json={"username": "no spaces!"}, headers=bearer(token)
        )
        assert resp.status_code == 422
        assert resp.json()["code"] == 4001
