import asyncio
import os
import time
from contextlib import asynccontextmanager
from typing import Dict, List, Optional, Set, Tuple

# Settings are read once at import time; these must be set before any `src` import.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("TEST_MODE", "true")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("SUPABASE_URL", "http://supabase.test")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-entropy-for-hs256")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")

import httpx
import jwt
import pytest
import pytest_asyncio

from src.core.application import create_application
from src.core.config.settings import settings
from src.core.exceptions import CacheError, EmailServiceError, IdentityProviderError
from src.domain.entities.auth_user import AuthUser
from src.domain.interfaces.cache import CompareAndDeleteResult, ICacheService
from src.domain.interfaces.email import IEmailService
from src.domain.interfaces.identity import IIdentityProvider
from src.domain.services.auth.identity_bridge import IdentityBridge
from src.domain.services.auth.otp_guard import OtpCacheGuard
from src.domain.services.auth.session import SessionService
from src.domain.value_objects.token_pair import ProviderSession
from src.infrastructure.dependency_injection.auth_dependencies import get_redis_manager, get_session_service


class FakeClock:
    """Manually advanced epoch clock, starting at the wall clock by default."""

    def __init__(self, start: Optional[float] = None):
        self.now = time.time() if start is None else start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeCache(ICacheService):
    """In-memory cache with TTLs driven by a `FakeClock`.

    Operations named in `fail_on` raise `CacheError`.
    """

    def __init__(self, clock: Optional[FakeClock] = None):
        self.clock = clock or FakeClock()
        self.fail_on: Set[str] = set()
        self.set_calls: List[Tuple[str, str, int]] = []
        self._store: Dict[str, Tuple[str, float]] = {}
        self._lock = asyncio.Lock()

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise CacheError(f"{operation} unavailable")

    def _live(self, key: str) -> Optional[str]:
        entry = self._store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self.clock() >= expires_at:
            del self._store[key]
            return None
        return value

    async def get(self, key: str) -> Optional[str]:
        self._check("get")
        return self._live(key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._check("set")
        self.set_calls.append((key, value, ttl_seconds))
        self._store[key] = (value, self.clock() + ttl_seconds)

    async def delete(self, key: str) -> None:
        self._check("delete")
        self._store.pop(key, None)

    async def compare_and_delete(self, key: str, expected: str) -> CompareAndDeleteResult:
        self._check("compare_and_delete")
        async with self._lock:
            # Yield so concurrent callers genuinely interleave around the lock.
            await asyncio.sleep(0)
            current = self._live(key)
            if current is None:
                return CompareAndDeleteResult.MISSING
            if current != expected:
                return CompareAndDeleteResult.MISMATCH
            del self._store[key]
            return CompareAndDeleteResult.DELETED


class FakeIdentityProvider(IIdentityProvider):
    """Identity provider double.

    Every code it ever issued for an email stays acceptable, so single-use and
    latest-code-only behavior can only come from the cache guard. Access tokens
    are HS256 JWTs signed with `jwt_secret`; refresh tokens rotate on use.
    """

    def __init__(self, jwt_secret: str = "", audience: str = "authenticated"):
        self.jwt_secret = jwt_secret or settings.SUPABASE_JWT_SECRET.get_secret_value()
        self.audience = audience
        self.reject_requests_with: Optional[str] = None
        self.issued: Dict[str, Set[str]] = {}
        self.refresh_tokens: Dict[str, AuthUser] = {}
        self.access_tokens: Dict[str, AuthUser] = {}
        self.calls: List[Tuple[str, str]] = []
        self._counter = 0

    def user_for(self, email: str) -> AuthUser:
        return AuthUser(id=f"user-{email}", email=email, attributes={"role": "authenticated"})

    async def generate_otp(self, email, *, should_create_user=True, redirect_to=None) -> str:
        self.calls.append(("generate_otp", email))
        if self.reject_requests_with:
            raise IdentityProviderError(self.reject_requests_with, status=429)
        self._counter += 1
        code = f"{100000 + self._counter:06d}"
        self.issued.setdefault(email, set()).add(code)
        return code

    async def verify_otp(self, email: str, code: str) -> ProviderSession:
        self.calls.append(("verify_otp", email))
        if code not in self.issued.get(email, set()):
            raise IdentityProviderError("Token has expired or is invalid", status=403)
        return self.mint(self.user_for(email))

    async def refresh_session(self, refresh_token: str) -> ProviderSession:
        self.calls.append(("refresh_session", refresh_token))
        user = self.refresh_tokens.pop(refresh_token, None)
        if user is None:
            raise IdentityProviderError("Invalid Refresh Token: Refresh Token Not Found", status=400)
        return self.mint(user)

    async def get_user(self, access_token: str) -> AuthUser:
        self.calls.append(("get_user", access_token))
        user = self.access_tokens.get(access_token)
        if user is None:
            raise IdentityProviderError("invalid JWT", status=401)
        return user

    def mint(self, user: AuthUser, expires_in: int = 3600) -> ProviderSession:
        self._counter += 1
        access_token = jwt.encode(
            {
                "sub": user.id,
                "email": user.email,
                "aud": self.audience,
                "exp": int(time.time()) + expires_in,
                "jti": str(self._counter),
            },
            self.jwt_secret,
            algorithm="HS256",
        )
        refresh_token = f"refresh-{self._counter}"
        self.access_tokens[access_token] = user
        self.refresh_tokens[refresh_token] = user
        return ProviderSession(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=expires_in,
            user=user,
        )


class RecordingEmailSender(IEmailService):
    """Records every send; can be told to fail."""

    def __init__(self):
        self.sent: List[Tuple[str, str]] = []
        self.raise_error = False
        self.return_value = True

    async def send_otp_email(self, to_email: str, code: str, language: str = "en") -> bool:
        if self.raise_error:
            raise EmailServiceError("SMTP connection refused")
        self.sent.append((to_email, code))
        return self.return_value

    def last_code_for(self, email: str) -> Optional[str]:
        for to_email, code in reversed(self.sent):
            if to_email == email:
                return code
        return None


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return FakeCache(clock)


@pytest.fixture
def identity_provider():
    return FakeIdentityProvider()


@pytest.fixture
def email_sender():
    return RecordingEmailSender()


@pytest.fixture
def session_service(identity_provider, cache, email_sender, clock):
    return SessionService(
        IdentityBridge(identity_provider, timeout_seconds=1.0),
        OtpCacheGuard(cache, ttl_seconds=600),
        email_sender,
        clock=clock,
    )


@asynccontextmanager
async def no_lifespan(app):
    yield


@pytest.fixture
def redis_manager():
    """Override for the Redis manager dependency; `None` means Redis never started."""
    return None


@pytest.fixture
def app(session_service, redis_manager):
    """Application wired to the in-memory collaborators above."""
    application = create_application(lifespan=no_lifespan)
    application.dependency_overrides[get_session_service] = lambda: session_service
    application.dependency_overrides[get_redis_manager] = lambda: redis_manager
    return application


@pytest_asyncio.fixture
async def async_client(app):
    """Provides an async test client."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def set_cookie_headers():
    """Returns the raw Set-Cookie headers a response carries for one cookie name."""

    def _headers(response: httpx.Response, name: str):
        return [header for header in response.headers.get_list("set-cookie") if header.startswith(f"{name}=")]

    return _headers
