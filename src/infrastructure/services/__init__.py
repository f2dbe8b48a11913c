"""Infrastructure Services.

Concrete implementations of the domain interfaces. These services handle
technical concerns and external integrations.

Service Categories:
- Cache: Redis-backed key-value storage with atomic compare-and-delete
- Email: OTP email rendering and SMTP delivery
- Identity: Supabase identity provider client
"""

from .cache import RedisCacheService
from .email import OtpEmailService
from .identity import SupabaseIdentityProvider

__all__ = [
    "RedisCacheService",
    "OtpEmailService",
    "SupabaseIdentityProvider",
]
