"""Domain Interfaces for dependency inversion.

These interfaces define the contracts of the three external collaborators
(identity provider, key-value cache, email sender) and of the session service
exposed to the HTTP layer, so each side can be substituted in tests.
"""

from .cache import CompareAndDeleteResult, ICacheService
from .email import IEmailService
from .identity import IIdentityProvider
from .services import ISessionService, OtpRequestResult

__all__ = [
    "CompareAndDeleteResult",
    "ICacheService",
    "IEmailService",
    "IIdentityProvider",
    "ISessionService",
    "OtpRequestResult",
]
