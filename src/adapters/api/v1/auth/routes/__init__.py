"""Subpackage aggregating individual auth route modules."""

__all__ = [
    "request_otp",
    "verify_otp",
    "refresh",
    "logout",
    "me",
]
