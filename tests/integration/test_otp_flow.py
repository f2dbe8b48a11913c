"""End-to-end session flow through the HTTP layer.

The client keeps the cookies the service sets, so each step relies only on what
a browser would hold.
"""

import pytest

from src.domain.value_objects.session_cookie import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE

EMAIL = "flow.user@example.com"


@pytest.mark.asyncio
async def test_request_verify_refresh_me_logout(async_client, email_sender, identity_provider):
    response = await async_client.post("/auth/otp/request", json={"email": EMAIL})
    assert response.status_code == 204
    code = email_sender.last_code_for(EMAIL)
    assert code is not None

    response = await async_client.post("/auth/otp/verify", json={"email": EMAIL, "code": code})
    assert response.status_code == 200
    assert response.json()["user"]["email"] == EMAIL
    first_refresh = async_client.cookies.get(REFRESH_TOKEN_COOKIE)
    assert first_refresh

    response = await async_client.get("/auth/me")
    assert response.status_code == 200
    assert response.json() == {"user": {"id": f"user-{EMAIL}", "email": EMAIL, "role": "authenticated"}}

    response = await async_client.post("/auth/refresh")
    assert response.status_code == 200
    assert async_client.cookies.get(REFRESH_TOKEN_COOKIE) != first_refresh

    response = await async_client.get("/auth/me")
    assert response.status_code == 200

    response = await async_client.post("/auth/logout")
    assert response.status_code == 200
    assert not async_client.cookies.get(ACCESS_TOKEN_COOKIE)

    response = await async_client.get("/auth/me")
    assert response.status_code == 401
    assert response.json() == {"error": "Not authenticated"}


@pytest.mark.asyncio
async def test_only_latest_code_is_accepted(async_client, email_sender):
    await async_client.post("/auth/otp/request", json={"email": EMAIL})
    stale = email_sender.last_code_for(EMAIL)
    await async_client.post("/auth/otp/request", json={"email": EMAIL})
    latest = email_sender.last_code_for(EMAIL)
    assert stale != latest

    response = await async_client.post("/auth/otp/verify", json={"email": EMAIL, "code": stale})
    assert response.status_code == 401

    response = await async_client.post("/auth/otp/verify", json={"email": EMAIL, "code": latest})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_code_expires_after_ttl(async_client, email_sender, clock):
    await async_client.post("/auth/otp/request", json={"email": EMAIL})
    code = email_sender.last_code_for(EMAIL)

    clock.advance(601)

    response = await async_client.post("/auth/otp/verify", json={"email": EMAIL, "code": code})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid code"}


@pytest.mark.asyncio
async def test_refreshed_token_cannot_be_replayed(async_client, email_sender):
    await async_client.post("/auth/otp/request", json={"email": EMAIL})
    code = email_sender.last_code_for(EMAIL)
    await async_client.post("/auth/otp/verify", json={"email": EMAIL, "code": code})
    spent = async_client.cookies.get(REFRESH_TOKEN_COOKIE)

    assert (await async_client.post("/auth/refresh")).status_code == 200

    async_client.cookies.clear()
    async_client.cookies.set(REFRESH_TOKEN_COOKIE, spent)
    response = await async_client.post("/auth/refresh")

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid refresh token"}
