"""
Redis cache settings.
"""
from pydantic import Field, field_validator, ValidationInfo, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
import logging

logger = logging.getLogger(__name__)


class RedisSettings(BaseSettings):
    """
    Defines settings for the Redis cache connection and the rate limiter that
    shares it.

    Security Note:
        - REDIS_PASSWORD must be set in production to prevent unauthorized access.
        - Use rediss:// (REDIS_SSL=true) when Redis is reached over an untrusted
          network; OTP codes are stored in clear text until consumed.
    """
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = Field(ge=1, le=65535, default=6379)
    REDIS_PASSWORD: SecretStr = SecretStr("")
    REDIS_SSL: bool = False
    REDIS_DB: int = Field(ge=0, default=0)
    REDIS_URL: str = Field(default="", validate_default=True)

    REDIS_SOCKET_TIMEOUT: float = Field(default=5.0, gt=0)
    REDIS_MAX_RECONNECT_ATTEMPTS: int = Field(default=10, ge=1)

    # Rate limiting settings
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_AUTH: str = "5/minute"
    RATE_LIMIT_STORAGE_URL: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @field_validator("REDIS_URL", mode="before")
    @classmethod
    def assemble_redis_url(cls, v: str | None, info: ValidationInfo) -> str:
        """
        Assembles the Redis connection URL if not provided explicitly.
        Masks password in logs for security.

        Args:
            v: Explicitly provided URL or None.
            info: Validation context with other field values.

        Returns:
            Assembled or provided Redis URL.
        """
        if v:
            return v

        values = info.data
        protocol = "rediss" if values.get("REDIS_SSL") else "redis"
        redis_password = values.get("REDIS_PASSWORD")
        secret = redis_password.get_secret_value() if isinstance(redis_password, SecretStr) else ""
        password = f":{secret}@" if secret else ""

        url = (
            f"{protocol}://{password}{values.get('REDIS_HOST')}:"
            f"{values.get('REDIS_PORT')}/{values.get('REDIS_DB', 0)}"
        )
        logger.debug("Assembled REDIS_URL (password masked for security).")
        return url

    @field_validator("RATE_LIMIT_AUTH")
    @classmethod
    def validate_rate_limit_format(cls, value: str) -> str:
        """
        Validates the format of rate limit strings (e.g., '5/minute').

        Raises:
            ValueError: If format is invalid.
        """
        try:
            count, period = value.split('/')
        except ValueError:
            raise ValueError(f"Invalid rate limit format: {value}. Must be 'count/period'.")
        if not count.isdigit() or int(count) <= 0:
            raise ValueError("Rate limit count must be a positive integer.")
        if period not in ('second', 'minute', 'hour', 'day'):
            raise ValueError("Rate limit period must be second, minute, hour, or day.")
        return value
