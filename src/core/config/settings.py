"""Main application settings and configuration management.

This module composes all the application settings from the different modules
(app, auth, redis, email) into a single, accessible `Settings` class.

It loads settings from environment variables and .env files, validates them,
and provides a single `settings` object for use throughout the application.

Environment Support:
- Development: Uses .env, emails are logged instead of sent
- Test: Uses .env.test, emails are logged instead of sent
- Staging: Uses .env.staging, SMTP credentials required
- Production: Uses .env.production, SMTP credentials required, secure cookies
"""

import logging
import os
from pathlib import Path

from pydantic_settings import SettingsConfigDict

from src.core.exceptions import ConfigurationError

from .app import AppSettings
from .auth import AuthSettings
from .email import EmailSettings
from .redis import RedisSettings

logger = logging.getLogger(__name__)


class Settings(AppSettings, RedisSettings, AuthSettings, EmailSettings):
    """The main settings class that aggregates all application configurations.

    Security Note:
        - Sensitive fields (Supabase keys, JWT secret, passwords) are SecretStr
          and must never be logged or exposed.
        - `validate_required_fields` is called once during application
          initialization; a missing credential stops the service from starting.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    def __init__(self, **kwargs):
        """Initialize settings with environment-specific configuration."""
        super().__init__(**kwargs)
        self._set_environment_defaults(self.APP_ENV)

    def _set_environment_defaults(self, env: str) -> None:
        """Set environment-specific default values.

        Args:
            env: Environment name
        """
        if env in ("development", "test"):
            self.EMAIL_TEST_MODE = True

        if env == "development":
            self.DEBUG = True

        logger.info(
            f"Application running in {env} environment "
            f"(email test mode: {self.EMAIL_TEST_MODE}, debug: {self.DEBUG})"
        )

    def validate_required_fields(self) -> None:
        """Validates that all required credentials are set.

        Provider and cache credentials are required in every environment except
        explicit test mode, where collaborators are substituted.

        Raises:
            ConfigurationError: If required fields are missing and not in test mode.
        """
        required_fields = {
            "SUPABASE_URL": self.SUPABASE_URL,
            "SUPABASE_ANON_KEY": self.SUPABASE_ANON_KEY.get_secret_value(),
            "SUPABASE_SERVICE_ROLE_KEY": self.SUPABASE_SERVICE_ROLE_KEY.get_secret_value(),
            "SUPABASE_JWT_SECRET": self.SUPABASE_JWT_SECRET.get_secret_value(),
            "REDIS_URL": self.REDIS_URL,
        }

        missing_fields = [name for name, value in required_fields.items() if not value]
        if missing_fields:
            error_msg = f"Missing required environment variables: {', '.join(missing_fields)}"
            if self.TEST_MODE:
                logger.warning(f"Test mode: {error_msg}")
            else:
                logger.error(error_msg)
                raise ConfigurationError(error_msg)
        else:
            logger.info("All required environment variables are set.")

        try:
            self.validate_smtp_config()
        except ValueError as e:
            if self.TEST_MODE:
                logger.warning(f"Test mode: Email config warning - {e}")
            else:
                logger.error(f"Email configuration error: {e}")
                raise ConfigurationError(str(e)) from e


def create_settings() -> Settings:
    """Create settings instance with environment-specific configuration.

    Returns:
        Settings: Configured settings instance
    """
    env = os.getenv("APP_ENV", "development")

    env_files = {
        "development": ".env",
        "test": ".env.test",
        "staging": ".env.staging",
        "production": ".env.production"
    }

    env_file = env_files.get(env, ".env")

    if env != "development" and Path(env_file).exists():
        logger.info(f"Loading environment configuration from {env_file}")
        return Settings(_env_file=env_file)
    if Path(".env").exists():
        logger.info(f"Loading environment configuration from .env (environment: {env})")
    else:
        logger.warning(f"No .env file found, using environment variables only (environment: {env})")
    return Settings()


# Create a singleton instance of the settings to be used across the application.
settings = create_settings()
