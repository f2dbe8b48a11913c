"""Domain Services for the session bounded context.

- Token Codec: provider session to token pair and session cookies
- OTP Cache Guard: single-use, time-bounded codes on the key-value cache
- Identity Bridge: null-on-failure access to the identity provider
- Session Service: orchestration of the four public session operations
"""

from .auth import IdentityBridge, OtpCacheGuard, SessionService

__all__ = ["IdentityBridge", "OtpCacheGuard", "SessionService"]
