from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter
from pydantic import BaseModel

from src.core.config.settings import settings
from src.core.logging import logger
from src.infrastructure.dependency_injection.auth_dependencies import RedisManagerDep

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    env: str
    version: str
    services: Dict[str, Any]
    timestamp: datetime


@router.get("", response_model=HealthResponse)
async def health_check(redis_manager: RedisManagerDep):
    """
    Reports the Redis connection state and the running environment.
    """
    if redis_manager is None:
        redis_health: Dict[str, Any] = {"status": "disconnected", "connected": False, "error": "Not initialized"}
    else:
        redis_health = await redis_manager.health_check()

    if not redis_health.get("connected"):
        logger.warning("redis_health_check_failed", error=redis_health.get("error"))

    return HealthResponse(
        status="ok" if redis_health.get("connected") else "degraded",
        env=settings.APP_ENV,
        version=settings.VERSION,
        services={"redis": redis_health},
        timestamp=datetime.now(timezone.utc),
    )
