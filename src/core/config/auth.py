"""Authentication settings: identity provider credentials, OTP and cookie policy.
"""

import logging

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class AuthSettings(BaseSettings):
    """Defines settings for the identity provider (Supabase), OTP storage and
    session cookies.

    Security Note:
        - SUPABASE_SERVICE_ROLE_KEY bypasses row level security and must only
          ever live on the server. It is used for OTP generation and user lookup.
        - SUPABASE_JWT_SECRET verifies access tokens locally; it is a signing
          secret and must never be logged.
    """

    # Identity provider
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: SecretStr = SecretStr("")
    SUPABASE_SERVICE_ROLE_KEY: SecretStr = SecretStr("")
    SUPABASE_JWT_SECRET: SecretStr = SecretStr("")
    JWT_AUDIENCE: str = "authenticated"
    IDENTITY_PROVIDER_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    # One-time passcodes
    OTP_TTL_SECONDS: int = Field(default=600, ge=1)
    OTP_CACHE_KEY_PREFIX: str = "otp:"
    OTP_SHOULD_CREATE_USER: bool = True
    OTP_REDIRECT_URL: str = ""

    # Session cookies (Supabase defaults: 1h access, 60 days refresh)
    ACCESS_TOKEN_COOKIE_MAX_AGE: int = Field(default=60 * 60, ge=0)
    REFRESH_TOKEN_COOKIE_MAX_AGE: int = Field(default=60 * 60 * 24 * 60, ge=0)
