"""Supabase implementation of the identity provider.

The user-facing auth flows (verify, refresh) run on a fresh anon-key client per
call: a client that completes a sign-in adopts that user's bearer token, so one
must never serve a second user. The admin operations (code generation, user
lookup) share one service-role client. No client persists sessions or refreshes
tokens in the background; the server never holds user sessions.
"""

from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx
import structlog
from supabase import AsyncClient, AuthError, acreate_client
from supabase.lib.client_options import AsyncClientOptions

from src.core.exceptions import IdentityProviderError
from src.domain.entities.auth_user import AuthUser
from src.domain.interfaces.identity import IIdentityProvider
from src.domain.value_objects.token_pair import ProviderSession

logger = structlog.get_logger(__name__)

SIGNUPS_DISABLED_MESSAGE = "Signups not allowed for otp"


def _client_options() -> AsyncClientOptions:
    return AsyncClientOptions(auto_refresh_token=False, persist_session=False)


def _isoformat(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def to_auth_user(user: Any) -> AuthUser:
    """Projects a Supabase `User` model onto `AuthUser`."""
    return AuthUser(
        id=str(user.id),
        email=user.email or "",
        attributes={
            "role": getattr(user, "role", None),
            "aud": getattr(user, "aud", None),
            "app_metadata": dict(getattr(user, "app_metadata", None) or {}),
            "user_metadata": dict(getattr(user, "user_metadata", None) or {}),
            "created_at": _isoformat(getattr(user, "created_at", None)),
            "last_sign_in_at": _isoformat(getattr(user, "last_sign_in_at", None)),
        },
    )


def _to_provider_session(session: Any, fallback_user: Any = None) -> ProviderSession:
    user = session.user or fallback_user
    return ProviderSession(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=int(session.expires_in or 0),
        token_type=session.token_type or "bearer",
        user=to_auth_user(user) if user is not None else None,
    )


def _provider_error(exc: Exception) -> IdentityProviderError:
    if isinstance(exc, AuthError):
        return IdentityProviderError(
            getattr(exc, "message", None) or str(exc),
            status=getattr(exc, "status", None),
        )
    return IdentityProviderError(
        f"Identity provider unreachable: {exc}",
        code="identity_provider_unreachable",
    )


ClientFactory = Callable[[], Awaitable[AsyncClient]]


class SupabaseIdentityProvider(IIdentityProvider):
    def __init__(self, client_factory: ClientFactory, admin_client: AsyncClient):
        self.client_factory = client_factory
        self.admin_client = admin_client

    @classmethod
    async def create(
        cls,
        url: str,
        anon_key: str,
        service_role_key: str,
    ) -> "SupabaseIdentityProvider":
        async def anon_client() -> AsyncClient:
            return await acreate_client(url, anon_key, options=_client_options())

        admin_client = await acreate_client(url, service_role_key, options=_client_options())
        logger.info("supabase_clients_created")
        return cls(anon_client, admin_client)

    async def generate_otp(
        self,
        email: str,
        *,
        should_create_user: bool = True,
        redirect_to: Optional[str] = None,
    ) -> str:
        # The admin API has no "do not create" flag. A user that has never
        # confirmed an email or signed in was created by this very call.
        params: Dict[str, Any] = {"type": "magiclink", "email": email}
        if redirect_to:
            params["options"] = {"redirect_to": redirect_to}

        try:
            response = await self.admin_client.auth.admin.generate_link(params)
        except (AuthError, httpx.HTTPError) as exc:
            raise _provider_error(exc) from exc

        user = response.user
        if not should_create_user and user is not None:
            if user.last_sign_in_at is None and user.email_confirmed_at is None:
                raise IdentityProviderError(SIGNUPS_DISABLED_MESSAGE, code="signup_disabled", status=422)

        code = response.properties.email_otp if response.properties else None
        if not code:
            raise IdentityProviderError("Identity provider returned no code")
        return code

    async def verify_otp(self, email: str, code: str) -> ProviderSession:
        try:
            client = await self.client_factory()
            response = await client.auth.verify_otp({"email": email, "token": code, "type": "email"})
        except (AuthError, httpx.HTTPError) as exc:
            raise _provider_error(exc) from exc

        if response is None or response.session is None:
            raise IdentityProviderError("Identity provider returned no session")
        return _to_provider_session(response.session, response.user)

    async def refresh_session(self, refresh_token: str) -> ProviderSession:
        try:
            client = await self.client_factory()
            response = await client.auth.refresh_session(refresh_token)
        except (AuthError, httpx.HTTPError) as exc:
            raise _provider_error(exc) from exc

        if response is None or response.session is None:
            raise IdentityProviderError("Identity provider returned no session")
        return _to_provider_session(response.session, response.user)

    async def get_user(self, access_token: str) -> AuthUser:
        try:
            response = await self.admin_client.auth.get_user(access_token)
        except (AuthError, httpx.HTTPError) as exc:
            raise _provider_error(exc) from exc

        if response is None or response.user is None:
            raise IdentityProviderError("Identity provider returned no user")
        return to_auth_user(response.user)
