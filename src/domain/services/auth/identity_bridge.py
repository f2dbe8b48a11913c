"""Identity bridge: the only component that talks to the identity provider.

Provider rejections, transport failures and timeouts are logged and surfaced
to the caller as None or a failed result. Nothing is retried here; a retry is
always a fresh call by the user.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Optional, TypeVar

from structlog import get_logger

from src.core.exceptions import IdentityProviderError
from src.core.logging import mask_email
from src.domain.entities.auth_user import AuthUser
from src.domain.interfaces.identity import IIdentityProvider
from src.domain.value_objects.token_pair import ProviderSession

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_PROVIDER_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class OtpRequestOptions:
    """Options forwarded to the provider when generating a code.

    Attributes:
        should_create_user: Provision an account for unknown emails.
        redirect_to: Where the provider's own magic link would land.
    """

    should_create_user: bool = True
    redirect_to: Optional[str] = None


@dataclass(frozen=True, slots=True)
class OtpIssueResult:
    """Outcome of asking the provider for a code."""

    success: bool
    code: Optional[str] = None
    error: Optional[str] = None

    def __repr__(self) -> str:
        return f"OtpIssueResult(success={self.success}, error={self.error!r})"


class IdentityBridge:
    """Wraps an `IIdentityProvider` with null-on-failure semantics.

    Attributes:
        provider: The identity provider client.
        timeout_seconds: Upper bound for each provider call. A call that
            exceeds it is treated as a provider failure.
        default_options: Options used when `request_otp` gets none.
    """

    def __init__(
        self,
        provider: IIdentityProvider,
        timeout_seconds: float = DEFAULT_PROVIDER_TIMEOUT_SECONDS,
        default_options: Optional[OtpRequestOptions] = None,
    ):
        self.provider = provider
        self.timeout_seconds = timeout_seconds
        self.default_options = default_options or OtpRequestOptions()

    async def request_otp(
        self, email: str, options: Optional[OtpRequestOptions] = None
    ) -> OtpIssueResult:
        """Asks the provider to generate a fresh code for `email`.

        The provider does not email the code; delivery is left to the caller so
        the code can be cached first.
        """
        opts = options or self.default_options
        try:
            code = await self._call(
                self.provider.generate_otp(
                    email,
                    should_create_user=opts.should_create_user,
                    redirect_to=opts.redirect_to,
                )
            )
        except IdentityProviderError as exc:
            logger.error("otp_request_rejected", email=mask_email(email), error=exc.message)
            return OtpIssueResult(success=False, error=exc.message)

        if not code:
            logger.error("otp_request_missing_code", email=mask_email(email))
            return OtpIssueResult(success=False, error="Identity provider returned no code")
        return OtpIssueResult(success=True, code=code)

    async def verify_otp(self, email: str, code: str) -> Optional[ProviderSession]:
        try:
            return await self._call(self.provider.verify_otp(email, code))
        except IdentityProviderError as exc:
            logger.warning("otp_verification_rejected", email=mask_email(email), error=exc.message)
            return None

    async def refresh_session(self, refresh_token: str) -> Optional[ProviderSession]:
        """Exchanges a refresh token; None if it is expired, revoked, or was
        already rotated."""
        if not refresh_token:
            return None
        try:
            return await self._call(self.provider.refresh_session(refresh_token))
        except IdentityProviderError as exc:
            logger.warning("session_refresh_rejected", error=exc.message)
            return None

    async def resolve_user(self, access_token: str) -> Optional[AuthUser]:
        if not access_token:
            return None
        try:
            return await self._call(self.provider.get_user(access_token))
        except IdentityProviderError as exc:
            logger.warning("user_resolution_failed", error=exc.message)
            return None

    async def _call(self, operation: Awaitable[T]) -> T:
        """Awaits a provider call, turning a timeout into `IdentityProviderError`."""
        try:
            return await asyncio.wait_for(operation, timeout=self.timeout_seconds)
        except asyncio.TimeoutError as exc:
            raise IdentityProviderError(
                f"Identity provider did not answer within {self.timeout_seconds}s",
                code="identity_provider_timeout",
            ) from exc
