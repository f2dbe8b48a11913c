"""Redis implementation of the cache interface."""

from typing import Awaitable, Callable, Optional, TypeVar

from redis.asyncio import Redis
from redis.commands.core import AsyncScript
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError
from structlog import get_logger

from src.core.exceptions import CacheError
from src.domain.interfaces.cache import CompareAndDeleteResult, ICacheService
from src.infrastructure.redis import RedisConnectionManager

logger = get_logger(__name__)

T = TypeVar("T")

# Returns 1 when the key held ARGV[1] and was deleted, 0 on mismatch, -1 when absent.
COMPARE_AND_DELETE_SCRIPT = """
local current = redis.call('GET', KEYS[1])
if not current then
    return -1
end
if current == ARGV[1] then
    redis.call('DEL', KEYS[1])
    return 1
end
return 0
"""

_SCRIPT_RESULTS = {
    1: CompareAndDeleteResult.DELETED,
    0: CompareAndDeleteResult.MISMATCH,
    -1: CompareAndDeleteResult.MISSING,
}


class RedisCacheService(ICacheService):
    """Cache operations over a managed Redis connection.

    Any `RedisError` is wrapped as `CacheError`. Connection-level failures
    additionally mark the manager as errored so the next call reconnects.
    """

    def __init__(self, connection_manager: RedisConnectionManager):
        self.connection_manager = connection_manager
        self._compare_and_delete_script: Optional[AsyncScript] = None

    async def get(self, key: str) -> Optional[str]:
        return await self._execute("get", lambda client: client.get(key))

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._execute("set", lambda client: client.set(key, value, ex=ttl_seconds))

    async def delete(self, key: str) -> None:
        await self._execute("delete", lambda client: client.delete(key))

    async def compare_and_delete(self, key: str, expected: str) -> CompareAndDeleteResult:
        """Runs the GET/compare/DEL sequence as one server-side script.

        Redis executes a script atomically, so concurrent callers presenting
        the same value cannot both see it deleted. The script is sent by SHA
        and only loaded again after a `NOSCRIPT` reply.
        """
        raw = await self._execute(
            "compare_and_delete",
            lambda client: self._script_for(client)(keys=[key], args=[expected], client=client),
        )
        try:
            return _SCRIPT_RESULTS[int(raw)]
        except (KeyError, TypeError, ValueError) as exc:
            raise CacheError(f"Unexpected compare_and_delete reply: {raw!r}") from exc

    def _script_for(self, client: Redis) -> AsyncScript:
        # The registered script is bound by SHA only; each call names the live client.
        if self._compare_and_delete_script is None:
            self._compare_and_delete_script = client.register_script(COMPARE_AND_DELETE_SCRIPT)
        return self._compare_and_delete_script

    async def _execute(self, operation: str, command: Callable[[Redis], Awaitable[T]]) -> T:
        client = await self.connection_manager.get_client()
        try:
            return await command(client)
        except (RedisConnectionError, RedisTimeoutError) as exc:
            self.connection_manager.mark_error(exc)
            logger.error("redis_command_failed", operation=operation, error=str(exc))
            raise CacheError(f"Redis {operation} failed: {exc}") from exc
        except RedisError as exc:
            logger.error("redis_command_failed", operation=operation, error=str(exc))
            raise CacheError(f"Redis {operation} failed: {exc}") from exc
