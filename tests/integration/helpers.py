"""Sign-in helpers shared by the integration tests."""

import uuid

from httpx import AsyncClient

ADMIN_EMAIL = "integration-admin@example.com"


async def sign_in(client: AsyncClient, email: str | None = None) -> str:
    """Request a sign-in link, follow it, and return the access token."""
    email = email or f"trader_{uuid.uuid4().hex[:8]}@example.com"
    link_resp = await client.post("/api/v1/auth/magic-link", json={"email": email})
    assert link_resp.status_code == 202, link_resp.text
    link = link_resp.json()["data"]["sign_in_link"]
    token = link.split("token=", 1)[1]
    verify_resp = await client.post("/api/v1/auth/verify", json={"token": token})
    assert verify_resp.status_code == 200, verify_resp.text
    return str(verify_resp.json()["data"]["access_token"])


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
