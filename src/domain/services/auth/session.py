"""Session orchestration for passwordless email sign-in.

Combines the identity bridge and OTP cache guard with the email sender into the
four session operations. Emails are normalized once here, before any
collaborator sees them.
"""

import time
from typing import Callable, Optional

from structlog import get_logger

from src.core.exceptions import EmailServiceError
from src.core.logging import mask_email
from src.domain.entities.auth_user import AuthUser
from src.domain.interfaces.email import IEmailService
from src.domain.interfaces.services import ISessionService, OtpRequestResult
from src.domain.services.auth.identity_bridge import IdentityBridge
from src.domain.services.auth.otp_guard import OtpCacheGuard
from src.domain.services.auth.token_codec import to_token_pair
from src.domain.value_objects.token_pair import TokenPair

logger = get_logger(__name__)

CACHE_FAILURE_ERROR = "internal cache failure"
DISPATCH_FAILURE_ERROR = "email dispatch failed"


def normalize_email(email: str) -> str:
    """Canonical form used for provider calls and cache keys."""
    return email.strip().lower()


class SessionService(ISessionService):
    """Orchestrates the identity bridge, the OTP cache guard and the email
    sender into the four public session operations.

    Failure handling:
        1. Provider rejection: surfaced as a failed result or None, never retried.
        2. Cache failure on store: fatal to the request, the email is not sent
           because the code could never be validated.
        3. Cache failure on consume: treated exactly like an expired code.
        4. Email dispatch failure: surfaced as a failed result; the cached code
           stays live until its TTL, and a retried request overwrites it.

    Side effects are not rolled back on abandonment: delivery is at-least-once,
    validation is at-most-once.

    Attributes:
        identity_bridge (IdentityBridge): Provider access.
        otp_guard (OtpCacheGuard): Single-use code storage.
        email_service (IEmailService): Code delivery.
    """

    def __init__(
        self,
        identity_bridge: IdentityBridge,
        otp_guard: OtpCacheGuard,
        email_service: IEmailService,
        clock: Callable[[], float] = time.time,
    ):
        self.identity_bridge = identity_bridge
        self.otp_guard = otp_guard
        self.email_service = email_service
        self.clock = clock

    async def request_otp(self, email: str) -> OtpRequestResult:
        """Issue a fresh code for `email`, cache it, then deliver it.

        Exactly one cache write and, on success, one email per call.
        """
        email = normalize_email(email)
        masked = mask_email(email)

        issued = await self.identity_bridge.request_otp(email)
        if not issued.success:
            return OtpRequestResult.failed(issued.error or "OTP request rejected")

        if not await self.otp_guard.store(email, issued.code):
            logger.error("otp_request_aborted_cache_failure", email=masked)
            return OtpRequestResult.failed(CACHE_FAILURE_ERROR)

        try:
            sent = await self.email_service.send_otp_email(email, issued.code)
        except EmailServiceError as exc:
            logger.error("otp_email_dispatch_failed", email=masked, error=exc.message)
            return OtpRequestResult.failed(DISPATCH_FAILURE_ERROR)

        if not sent:
            logger.error("otp_email_dispatch_failed", email=masked, error="sender reported failure")
            return OtpRequestResult.failed(DISPATCH_FAILURE_ERROR)

        logger.info("otp_requested", email=masked)
        return OtpRequestResult.ok()

    async def verify_otp(self, email: str, code: str) -> Optional[TokenPair]:
        """Verify `code` for `email` and mint a token pair.

        The provider is asked first; a rejection returns immediately without
        touching the cache. An accepted code must then also be consumed from the
        cache, which acts as the authoritative single-use gate.
        """
        email = normalize_email(email)

        session = await self.identity_bridge.verify_otp(email, code)
        if session is None:
            return None

        if not await self.otp_guard.consume(email, code):
            logger.warning("otp_verification_cache_gate_rejected", email=mask_email(email))
            return None

        logger.info("otp_verified", email=mask_email(email))
        return to_token_pair(session, now=self.clock)

    async def refresh_session(self, refresh_token: str) -> Optional[TokenPair]:
        session = await self.identity_bridge.refresh_session(refresh_token)
        if session is None:
            return None
        logger.debug("session_refreshed")
        return to_token_pair(session, now=self.clock)

    async def resolve_user(self, access_token: str) -> Optional[AuthUser]:
        return await self.identity_bridge.resolve_user(access_token)
