"""Session and credential issuance services."""

from .identity_bridge import IdentityBridge, OtpIssueResult, OtpRequestOptions
from .otp_guard import OtpCacheGuard
from .session import SessionService, normalize_email

__all__ = [
    "IdentityBridge",
    "OtpCacheGuard",
    "OtpIssueResult",
    "OtpRequestOptions",
    "SessionService",
    "normalize_email",
]
