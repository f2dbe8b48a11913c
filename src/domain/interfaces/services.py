"""Session service interface consumed by the HTTP boundary."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from src.domain.entities.auth_user import AuthUser
from src.domain.value_objects.token_pair import TokenPair


@dataclass(frozen=True, slots=True)
class OtpRequestResult:
    """Outcome of an OTP request: `error` is set exactly when `success` is False."""

    success: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "OtpRequestResult":
        return cls(success=True)

    @classmethod
    def failed(cls, error: str) -> "OtpRequestResult":
        return cls(success=False, error=error)


class ISessionService(ABC):
    """The four public session operations.

    Each operation is independently callable; the cache is the only state
    shared between calls.
    """

    @abstractmethod
    async def request_otp(self, email: str) -> OtpRequestResult:
        """Issue a fresh code, cache it, and email it to the user."""
        raise NotImplementedError

    @abstractmethod
    async def verify_otp(self, email: str, code: str) -> Optional[TokenPair]:
        """Verify a code with the provider and consume it from the cache."""
        raise NotImplementedError

    @abstractmethod
    async def refresh_session(self, refresh_token: str) -> Optional[TokenPair]:
        """Exchange a refresh token for a new token pair."""
        raise NotImplementedError

    @abstractmethod
    async def resolve_user(self, access_token: str) -> Optional[AuthUser]:
        """Resolve an access token to its user."""
        raise NotImplementedError
