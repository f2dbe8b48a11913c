import pytest
from fastapi import FastAPI

from src.core.exceptions import CacheError
from src.core.lifecycle import create_lifespan_manager
from src.domain.services.auth.session import SessionService


@pytest.fixture
def patched_lifecycle(mocker, identity_provider):
    manager = mocker.MagicMock()
    manager.connect = mocker.AsyncMock()
    manager.close = mocker.AsyncMock()
    manager_cls = mocker.patch("src.core.lifecycle.RedisConnectionManager", return_value=manager)
    create = mocker.patch(
        "src.core.lifecycle.SupabaseIdentityProvider.create",
        new=mocker.AsyncMock(return_value=identity_provider),
    )
    mocker.patch("src.core.lifecycle.OtpEmailService")
    return manager, manager_cls, create


@pytest.mark.asyncio
async def test_lifespan_wires_state_and_closes_redis(patched_lifecycle):
    manager, manager_cls, create = patched_lifecycle
    app = FastAPI()

    async with create_lifespan_manager()(app):
        assert app.state.redis_manager is manager
        assert isinstance(app.state.session_service, SessionService)
        manager.connect.assert_awaited_once()
        create.assert_awaited_once()

    manager.close.assert_awaited_once()
    manager_cls.assert_called_once()


@pytest.mark.asyncio
async def test_lifespan_survives_unreachable_redis(patched_lifecycle):
    manager, _, _ = patched_lifecycle
    manager.connect.side_effect = CacheError("Redis unavailable after 10 attempts")
    app = FastAPI()

    async with create_lifespan_manager()(app):
        assert app.state.redis_manager is manager
        assert isinstance(app.state.session_service, SessionService)

    manager.close.assert_awaited_once()
