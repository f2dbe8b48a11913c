from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from src.core.config.settings import settings


def key_func(request: Request) -> str:
    """Keys rate limits by client IP address."""
    return get_remote_address(request)


def get_limiter() -> Limiter:
    """Factory function for the rate limiter.

    Limits live in Redis when `RATE_LIMIT_STORAGE_URL` is set so that every
    worker shares them, otherwise in process memory.

    Returns:
        Limiter: A configured slowapi.Limiter instance.
    """
    return Limiter(
        key_func=key_func,
        enabled=settings.RATE_LIMIT_ENABLED,
        storage_uri=settings.RATE_LIMIT_STORAGE_URL or "memory://",
    )


limiter = get_limiter()
