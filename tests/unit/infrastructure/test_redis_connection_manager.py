from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.core.exceptions import CacheError
from src.infrastructure.redis import ConnectionState, RedisConnectionManager


def make_client(ping_side_effect=None):
    client = AsyncMock()
    client.ping = AsyncMock(return_value=True, side_effect=ping_side_effect)
    client.aclose = AsyncMock()
    client.info = AsyncMock(
        return_value={
            "redis_version": "7.2.4",
            "used_memory_human": "1.2M",
            "connected_clients": 3,
            "uptime_in_seconds": 120,
        }
    )
    return client


class ClientFactory:
    def __init__(self, *clients):
        self.clients = list(clients)
        self.created = []

    def __call__(self):
        client = self.clients.pop(0)
        self.created.append(client)
        return client


def make_manager(factory, max_attempts=3):
    return RedisConnectionManager(
        "redis://localhost:6379/0",
        max_attempts=max_attempts,
        backoff_multiplier=0,
        client_factory=factory,
    )


@pytest.mark.asyncio
async def test_get_client_connects_lazily():
    client = make_client()
    manager = make_manager(ClientFactory(client))

    assert manager.state == ConnectionState.DISCONNECTED
    assert await manager.get_client() is client
    assert manager.state == ConnectionState.CONNECTED
    assert await manager.get_client() is client


@pytest.mark.asyncio
async def test_connect_retries_until_ping_succeeds():
    failing = make_client(RedisConnectionError("refused"))
    healthy = make_client()
    factory = ClientFactory(failing, healthy)
    manager = make_manager(factory)

    assert await manager.connect() is healthy
    failing.aclose.assert_awaited_once()
    assert manager.reconnect_attempts == 0


@pytest.mark.asyncio
async def test_connect_gives_up_after_max_attempts():
    factory = ClientFactory(*(make_client(RedisConnectionError("refused")) for _ in range(3)))
    manager = make_manager(factory, max_attempts=3)

    with pytest.raises(CacheError):
        await manager.connect()

    assert len(factory.created) == 3
    assert manager.state == ConnectionState.ERROR


@pytest.mark.asyncio
async def test_mark_error_forces_reconnect():
    first, second = make_client(), make_client()
    manager = make_manager(ClientFactory(first, second))
    await manager.get_client()

    manager.mark_error(RedisConnectionError("reset"))

    assert manager.state == ConnectionState.ERROR
    assert await manager.get_client() is second
    first.aclose.assert_awaited_once()


@pytest.mark.asyncio
async def test_close_refuses_further_use():
    client = make_client()
    manager = make_manager(ClientFactory(client))
    await manager.get_client()

    await manager.close()

    client.aclose.assert_awaited_once()
    assert manager.state == ConnectionState.DISCONNECTED
    with pytest.raises(CacheError):
        await manager.get_client()


@pytest.mark.asyncio
async def test_independent_managers_do_not_share_state():
    one = make_manager(ClientFactory(make_client()))
    two = make_manager(ClientFactory(make_client()))

    await one.get_client()
    await one.close()

    assert two.state == ConnectionState.DISCONNECTED
    assert two.shutdown_in_progress is False


@pytest.mark.asyncio
async def test_health_check_reports_info():
    manager = make_manager(ClientFactory(make_client()))
    await manager.connect()

    health = await manager.health_check()

    assert health["connected"] is True
    assert health["status"] == "connected"
    assert health["info"]["version"] == "7.2.4"
    assert health["info"]["connected_clients"] == 3
    assert "latency_ms" in health


@pytest.mark.asyncio
async def test_health_check_when_not_connected():
    manager = make_manager(ClientFactory())

    health = await manager.health_check()

    assert health == {"status": "disconnected", "connected": False, "error": "Client not connected"}
