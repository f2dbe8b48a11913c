import time

import jwt
import pytest

from src.core.exceptions import ConfigurationError
from src.domain.services.auth.token_codec import (
    build_access_token_cookie,
    build_refresh_token_cookie,
    build_session_cookies,
    to_token_pair,
    verify_access_token,
)
from src.domain.value_objects.session_cookie import (
    ACCESS_TOKEN_COOKIE,
    DEFAULT_ACCESS_TOKEN_MAX_AGE,
    DEFAULT_REFRESH_TOKEN_MAX_AGE,
    REFRESH_TOKEN_COOKIE,
)
from src.domain.value_objects.token_pair import ProviderSession, TokenPair

SECRET = "codec-test-secret-long-enough-for-hs256-keys"


def _token(claims, secret=SECRET):
    return jwt.encode(claims, secret, algorithm="HS256")


def test_to_token_pair_adds_expires_in_to_now():
    session = ProviderSession(access_token="a", refresh_token="r", expires_in=3600)

    pair = to_token_pair(session, now=lambda: 1_700_000_000.7)

    assert pair == TokenPair(access_token="a", refresh_token="r", expires_at=1_700_003_600)


def test_to_token_pair_rejects_wrong_shape():
    with pytest.raises(AttributeError):
        to_token_pair(object())


def test_access_cookie_defaults():
    cookie = build_access_token_cookie("tok")

    assert cookie.name == ACCESS_TOKEN_COOKIE
    assert cookie.max_age == DEFAULT_ACCESS_TOKEN_MAX_AGE
    assert cookie.http_only is True
    assert cookie.same_site == "lax"
    assert cookie.path == "/"
    assert cookie.secure is False


def test_refresh_cookie_defaults_to_sixty_days():
    cookie = build_refresh_token_cookie("tok", secure=True)

    assert cookie.name == REFRESH_TOKEN_COOKIE
    assert cookie.max_age == DEFAULT_REFRESH_TOKEN_MAX_AGE == 5_184_000
    assert cookie.secure is True


def test_session_cookies_track_access_token_lifetime():
    pair = TokenPair(access_token="a", refresh_token="r", expires_at=1_000 + 1_800)

    access, refresh = build_session_cookies(pair, now=lambda: 1_000.0, refresh_max_age=42)

    assert (access.value, access.max_age) == ("a", 1_800)
    assert (refresh.value, refresh.max_age) == ("r", 42)


def test_session_cookies_never_negative_for_expired_pair():
    pair = TokenPair(access_token="a", refresh_token="r", expires_at=500)

    access, _ = build_session_cookies(pair, now=lambda: 1_000.0)

    assert access.max_age == 0


def test_verify_access_token_returns_claims():
    token = _token({"sub": "u1", "aud": "authenticated", "exp": int(time.time()) + 60})

    claims = verify_access_token(token, SECRET, audience="authenticated")

    assert claims["sub"] == "u1"


@pytest.mark.parametrize(
    "claims, secret, audience",
    [
        ({"sub": "u1", "exp": int(time.time()) - 10}, SECRET, None),
        ({"sub": "u1", "exp": int(time.time()) + 60}, "another-secret-entirely-for-signing", None),
        ({"sub": "u1", "aud": "anon", "exp": int(time.time()) + 60}, SECRET, "authenticated"),
        ({"exp": int(time.time()) + 60}, SECRET, None),
    ],
    ids=["expired", "bad-signature", "wrong-audience", "missing-sub"],
)
def test_verify_access_token_rejects(claims, secret, audience):
    token = _token(claims, secret)

    assert verify_access_token(token, SECRET, audience=audience) is None


def test_verify_access_token_rejects_garbage_and_empty():
    assert verify_access_token("not-a-jwt", SECRET) is None
    assert verify_access_token("", SECRET) is None


def test_verify_access_token_requires_secret():
    with pytest.raises(ConfigurationError):
        verify_access_token("anything", "")
