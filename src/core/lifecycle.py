"""Application lifecycle management.

This module handles application startup and shutdown events, ensuring proper
initialization and cleanup of application resources.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.core.config.settings import settings
from src.core.exceptions import CacheError
from src.core.logging import logger
from src.infrastructure.dependency_injection.auth_dependencies import build_session_service
from src.infrastructure.redis import RedisConnectionManager
from src.infrastructure.services.cache import RedisCacheService
from src.infrastructure.services.email import OtpEmailService
from src.infrastructure.services.identity import SupabaseIdentityProvider


def create_lifespan_manager():
    """Create the application lifespan manager.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Builds the long-lived collaborators at startup and releases them at
        shutdown.

        An unreachable Redis does not abort startup: the connection manager
        reconnects on first use and `/health` reports the outage meanwhile.

        Args:
            app (FastAPI): The FastAPI application instance
        """
        # Startup
        redis_manager = RedisConnectionManager(
            settings.REDIS_URL,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
            max_attempts=settings.REDIS_MAX_RECONNECT_ATTEMPTS,
        )
        try:
            await redis_manager.connect()
        except CacheError as exc:
            logger.error("redis_unavailable_on_startup", error=exc.message)

        identity_provider = await SupabaseIdentityProvider.create(
            settings.SUPABASE_URL,
            settings.SUPABASE_ANON_KEY.get_secret_value(),
            settings.SUPABASE_SERVICE_ROLE_KEY.get_secret_value(),
        )

        app.state.redis_manager = redis_manager
        app.state.session_service = build_session_service(
            settings,
            cache=RedisCacheService(redis_manager),
            identity_provider=identity_provider,
            email_service=OtpEmailService(settings),
        )
        logger.info("application_startup", env=settings.APP_ENV, version=settings.VERSION)

        yield

        # Shutdown
        await redis_manager.close()
        logger.info("application_shutdown", env=settings.APP_ENV)

    return lifespan
