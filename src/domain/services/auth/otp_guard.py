"""OTP cache guard: single-use, time-bounded one-time codes on a key-value cache."""

from typing import Optional

from structlog import get_logger

from src.core.exceptions import CacheError
from src.core.logging import mask_email
from src.domain.interfaces.cache import CompareAndDeleteResult, ICacheService

logger = get_logger(__name__)

DEFAULT_OTP_TTL_SECONDS = 600
DEFAULT_KEY_PREFIX = "otp:"


class OtpCacheGuard:
    """Stores and validates one-time codes independently of the identity provider.

    Lifecycle of a record for one email::

        NONE -> ISSUED            (store)
        ISSUED -> ISSUED          (store again: overwrite, TTL reset)
        ISSUED -> CONSUMED        (consume with the live code, terminal)
        ISSUED -> EXPIRED         (TTL elapses, terminal)

    At most one record per email is live at any instant, and each issued code
    can be consumed at most once. Cache outages never fail open: a consume
    that cannot reach the cache is a non-match.
    """

    def __init__(
        self,
        cache: ICacheService,
        ttl_seconds: int = DEFAULT_OTP_TTL_SECONDS,
        key_prefix: str = DEFAULT_KEY_PREFIX,
    ):
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix

    def key_for(self, email: str) -> str:
        return f"{self.key_prefix}{email}"

    async def store(self, email: str, code: str, ttl_seconds: Optional[int] = None) -> bool:
        """Stores `code` for `email`, invalidating any previously issued code.

        Returns:
            bool: False if the cache write failed. Callers must not deliver the
            code in that case, since it could never be validated.
        """
        ttl = ttl_seconds if ttl_seconds is not None else self.ttl_seconds
        try:
            await self.cache.set(self.key_for(email), code, ttl)
        except CacheError as exc:
            logger.error("otp_store_cache_failure", email=mask_email(email), error=str(exc))
            return False

        logger.debug("otp_stored", email=mask_email(email), ttl_seconds=ttl)
        return True

    async def consume(self, email: str, supplied_code: str) -> bool:
        """Consumes the live code for `email` if it equals `supplied_code`.

        The match and the deletion are one atomic cache operation, so of two
        concurrent callers with the same correct code only one succeeds.

        Returns:
            bool: True only if this call deleted a matching live record.
        """
        if not supplied_code:
            return False

        try:
            outcome = await self.cache.compare_and_delete(self.key_for(email), supplied_code)
        except CacheError as exc:
            # Indistinguishable from an expired code for the user.
            logger.error("otp_consume_cache_unavailable", email=mask_email(email), error=str(exc))
            return False

        if outcome == CompareAndDeleteResult.DELETED:
            logger.debug("otp_consumed", email=mask_email(email))
            return True
        if outcome == CompareAndDeleteResult.MISSING:
            logger.info("otp_not_found_or_expired", email=mask_email(email))
        else:
            logger.info("otp_code_mismatch", email=mask_email(email))
        return False
