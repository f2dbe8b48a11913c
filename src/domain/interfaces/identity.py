"""Identity provider interface.

The identity provider is the external system of record for user accounts and
session cryptography. Implementations raise `IdentityProviderError` for every
rejection or transport failure; translating those into null results is the
job of the identity bridge.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities.auth_user import AuthUser
from src.domain.value_objects.token_pair import ProviderSession


class IIdentityProvider(ABC):
    """Raw contract with the identity provider."""

    @abstractmethod
    async def generate_otp(
        self,
        email: str,
        *,
        should_create_user: bool = True,
        redirect_to: Optional[str] = None,
    ) -> str:
        """Asks the provider to generate a one-time code for `email` and return it.

        The provider must not deliver the code itself; delivery happens only
        after the code has been cached.

        Raises:
            IdentityProviderError: If the provider rejects the request (rate
                limiting, invalid email, signups disabled) or is unreachable.
        """
        raise NotImplementedError

    @abstractmethod
    async def verify_otp(self, email: str, code: str) -> ProviderSession:
        """Verifies a code and mints a session.

        Raises:
            IdentityProviderError: If the code is rejected.
        """
        raise NotImplementedError

    @abstractmethod
    async def refresh_session(self, refresh_token: str) -> ProviderSession:
        """Exchanges a refresh token for a new session (rotating the token).

        Raises:
            IdentityProviderError: If the token is expired, revoked or reused.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_user(self, access_token: str) -> AuthUser:
        """Resolves an access token to the user it was issued for.

        Raises:
            IdentityProviderError: If the provider cannot validate the token.
        """
        raise NotImplementedError
