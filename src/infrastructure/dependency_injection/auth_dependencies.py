"""Dependencies for the session endpoints.

Long-lived collaborators (Redis connection manager, identity provider, email
sender) are created once by the application lifespan and stored on
`app.state`. The factories here hand them to route handlers, which makes every
one of them replaceable through `app.dependency_overrides` in tests.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request

from src.core.config.settings import Settings
from src.core.exceptions import ConfigurationError
from src.domain.interfaces.cache import ICacheService
from src.domain.interfaces.email import IEmailService
from src.domain.interfaces.identity import IIdentityProvider
from src.domain.interfaces.services import ISessionService
from src.domain.services.auth.identity_bridge import IdentityBridge, OtpRequestOptions
from src.domain.services.auth.otp_guard import OtpCacheGuard
from src.domain.services.auth.session import SessionService
from src.infrastructure.redis import RedisConnectionManager

# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


def build_session_service(
    config: Settings,
    cache: ICacheService,
    identity_provider: IIdentityProvider,
    email_service: IEmailService,
) -> SessionService:
    """Wires the session service from its three external collaborators.

    Args:
        config: Application settings (TTL, key prefix, provider options)
        cache: Key-value cache holding pending codes
        identity_provider: System of record for users and sessions
        email_service: Code delivery

    Returns:
        SessionService: Ready-to-use session service
    """
    bridge = IdentityBridge(
        identity_provider,
        timeout_seconds=config.IDENTITY_PROVIDER_TIMEOUT_SECONDS,
        default_options=OtpRequestOptions(
            should_create_user=config.OTP_SHOULD_CREATE_USER,
            redirect_to=config.OTP_REDIRECT_URL or None,
        ),
    )
    guard = OtpCacheGuard(
        cache,
        ttl_seconds=config.OTP_TTL_SECONDS,
        key_prefix=config.OTP_CACHE_KEY_PREFIX,
    )
    return SessionService(bridge, guard, email_service)


# ---------------------------------------------------------------------------
# Request-scoped accessors
# ---------------------------------------------------------------------------


def get_session_service(request: Request) -> ISessionService:
    """Returns the session service created at startup.

    Raises:
        ConfigurationError: If the application was started without a lifespan.
    """
    service = getattr(request.app.state, "session_service", None)
    if service is None:
        raise ConfigurationError("Session service is not initialized")
    return service


def get_redis_manager(request: Request) -> Optional[RedisConnectionManager]:
    return getattr(request.app.state, "redis_manager", None)


SessionServiceDep = Annotated[ISessionService, Depends(get_session_service)]
RedisManagerDep = Annotated[Optional[RedisConnectionManager], Depends(get_redis_manager)]
