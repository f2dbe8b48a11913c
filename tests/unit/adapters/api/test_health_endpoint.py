from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core.config.settings import settings


@pytest.mark.asyncio
async def test_health_degraded_without_redis(async_client):
    response = await async_client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "degraded"
    assert body["env"] == settings.APP_ENV
    assert body["version"] == settings.VERSION
    assert body["services"]["redis"]["connected"] is False


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "redis_manager",
    [
        MagicMock(
            health_check=AsyncMock(
                return_value={
                    "status": "connected",
                    "connected": True,
                    "latency_ms": 0.4,
                    "info": {"version": "7.2.4", "used_memory": "1M", "connected_clients": 1, "uptime_in_seconds": 9},
                }
            )
        )
    ],
)
async def test_health_ok_with_connected_redis(async_client, redis_manager):
    response = await async_client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["services"]["redis"]["info"]["version"] == "7.2.4"
    redis_manager.health_check.assert_awaited_once()
