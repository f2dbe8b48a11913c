"""
Redis Connection Module

This module owns the asynchronous Redis client used as the OTP cache and as the
rate limiter's storage. Connection state, reconnect attempts and the shutdown
flag live on an explicit `RedisConnectionManager` created by the application
lifespan, never in module globals, so tests and workers can hold independent
instances.

**Security Note**: Use a rediss:// URL (REDIS_SSL=true) when Redis is reached
over an untrusted network. Never log the connection URL, it may carry the
password.
"""

import asyncio
import time
from enum import Enum
from typing import Any, Callable, Dict, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError
from structlog import get_logger
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from src.core.exceptions import CacheError

logger = get_logger(__name__)


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTING = "disconnecting"
    DISCONNECTED = "disconnected"
    ERROR = "error"


class RedisConnectionManager:
    """Lifecycle owner for one Redis client.

    The client is created lazily on first use. Connecting retries with
    exponential backoff (50ms steps, capped at 2s) up to `max_attempts`; after
    a command fails with a connection error the manager is marked as errored
    and the next `get_client()` reconnects. Once `close()` has been called the
    manager refuses to hand out clients.
    """

    def __init__(
        self,
        url: str,
        *,
        instance_name: str = "redis-default",
        socket_timeout: float = 5.0,
        max_attempts: int = 10,
        backoff_multiplier: float = 0.05,
        client_factory: Optional[Callable[[], Redis]] = None,
    ):
        self.url = url
        self.instance_name = instance_name
        self.socket_timeout = socket_timeout
        self.max_attempts = max_attempts
        self.backoff_multiplier = backoff_multiplier
        self._client_factory = client_factory or self._default_client_factory

        self.state = ConnectionState.DISCONNECTED
        self.reconnect_attempts = 0
        self.shutdown_in_progress = False
        self._client: Optional[Redis] = None
        self._lock = asyncio.Lock()

    def _default_client_factory(self) -> Redis:
        return Redis.from_url(
            self.url,
            encoding="utf-8",
            decode_responses=True,
            socket_timeout=self.socket_timeout,
            socket_connect_timeout=self.socket_timeout,
        )

    async def connect(self) -> Redis:
        """Connects (or returns the live client), retrying transient failures.

        Raises:
            CacheError: If the manager is shut down or every attempt failed.
        """
        async with self._lock:
            if self.shutdown_in_progress:
                raise CacheError("Redis client is shutting down")
            if self._client is not None and self.state == ConnectionState.CONNECTED:
                return self._client

            await self._discard_client()
            self.state = ConnectionState.CONNECTING
            logger.info("redis_connecting", instance=self.instance_name)

            try:
                async for attempt in AsyncRetrying(
                    stop=stop_after_attempt(self.max_attempts),
                    wait=wait_exponential(multiplier=self.backoff_multiplier, max=2),
                    retry=retry_if_exception_type(RedisError),
                    reraise=True,
                ):
                    with attempt:
                        self.reconnect_attempts = attempt.retry_state.attempt_number
                        client = self._client_factory()
                        try:
                            await client.ping()
                        except RedisError:
                            logger.warning(
                                "redis_connect_attempt_failed",
                                instance=self.instance_name,
                                attempt=self.reconnect_attempts,
                                max_attempts=self.max_attempts,
                            )
                            await client.aclose()
                            raise
            except RedisError as exc:
                self.state = ConnectionState.ERROR
                logger.error(
                    "redis_connect_failed",
                    instance=self.instance_name,
                    attempts=self.reconnect_attempts,
                    error=str(exc),
                )
                raise CacheError(f"Unable to connect to Redis: {exc}") from exc

            self._client = client
            self.state = ConnectionState.CONNECTED
            self.reconnect_attempts = 0
            logger.info("redis_connected", instance=self.instance_name)
            return client

    async def get_client(self) -> Redis:
        """Returns a connected client, reconnecting after errors.

        Raises:
            CacheError: If the manager is shut down or Redis is unreachable.
        """
        if self.shutdown_in_progress:
            raise CacheError("Redis client is shutting down")
        if self._client is None or self.state != ConnectionState.CONNECTED:
            return await self.connect()
        return self._client

    def mark_error(self, exc: Exception) -> None:
        """Records a failed command so the next `get_client()` reconnects."""
        if self.state == ConnectionState.CONNECTED:
            logger.warning("redis_connection_error", instance=self.instance_name, error=str(exc))
            self.state = ConnectionState.ERROR

    async def close(self) -> None:
        """Gracefully disconnects; the manager cannot be used afterwards."""
        async with self._lock:
            if self.shutdown_in_progress and self._client is None:
                return
            self.shutdown_in_progress = True
            self.state = ConnectionState.DISCONNECTING
            logger.info("redis_disconnecting", instance=self.instance_name)
            await self._discard_client()
            self.state = ConnectionState.DISCONNECTED

    async def _discard_client(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        try:
            await client.aclose()
        except RedisError as exc:
            logger.warning("redis_close_failed", instance=self.instance_name, error=str(exc))

    async def health_check(self) -> Dict[str, Any]:
        """Pings Redis and reports latency plus a few INFO fields."""
        result: Dict[str, Any] = {"status": self.state.value, "connected": False}

        if self._client is None or self.state != ConnectionState.CONNECTED:
            result["error"] = "Client not connected"
            return result

        try:
            start = time.perf_counter()
            await self._client.ping()
            result["latency_ms"] = round((time.perf_counter() - start) * 1000, 2)
            info = await self._client.info()
        except RedisError as exc:
            self.mark_error(exc)
            result["status"] = self.state.value
            result["error"] = str(exc)
            return result

        result["connected"] = True
        result["info"] = {
            "version": str(info.get("redis_version", "unknown")),
            "used_memory": str(info.get("used_memory_human", "unknown")),
            "connected_clients": int(info.get("connected_clients", 0)),
            "uptime_in_seconds": int(info.get("uptime_in_seconds", 0)),
        }
        return result
