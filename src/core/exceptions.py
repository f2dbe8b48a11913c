"""Centralized, structured exception hierarchy for otpgate.

Each exception carries a machine-readable `code` for programmatic error
handling and a human-readable `message` for logging and user feedback.

The hierarchy is designed to:
- Separate configuration problems (fatal at startup) from per-request failures.
- Give each external collaborator (identity provider, cache, email sender) its
  own failure type so domain services can translate them into result values.
- Map cleanly to HTTP status codes in the API layer.
"""

from typing import Final

__all__: Final = [
    "OtpGateError",
    "ConfigurationError",
    "AuthenticationError",
    "ValidationError",
    "IdentityProviderError",
    "CacheError",
    "EmailServiceError",
    "TemplateRenderError",
]


class OtpGateError(Exception):
    """Base exception class for all custom errors in the application.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
        code (str): A unique, machine-readable error code.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Startup errors
# ---------------------------------------------------------------------------


class ConfigurationError(OtpGateError):
    """Raised when a required secret or credential is missing or invalid.

    This is never a per-request condition: it is raised while the application
    initializes and must prevent the service from starting.
    """

    def __init__(self, message: str, code: str = "configuration_error"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Request errors (401 / 400)
# ---------------------------------------------------------------------------


class AuthenticationError(OtpGateError):
    """Raised for authentication failures. Maps to `401 Unauthorized`."""

    def __init__(self, message: str, code: str = "authentication_error"):
        super().__init__(message, code)


class ValidationError(OtpGateError):
    """Raised for request data validation failures. Maps to `400 Bad Request`."""

    def __init__(self, message: str, code: str = "validation_error"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Collaborator errors (typically map to 503 Service Unavailable)
# ---------------------------------------------------------------------------


class IdentityProviderError(OtpGateError):
    """Raised when the identity provider rejects an operation or cannot be reached.

    Covers rejected codes, expired or revoked refresh tokens, malformed emails,
    provider-side rate limiting and transport failures. The message is the
    provider's own description when one is available.
    """

    def __init__(self, message: str, code: str = "identity_provider_error", status: int | None = None):
        super().__init__(message, code)
        self.status = status


class CacheError(OtpGateError):
    """Raised when the key-value cache is unreachable or a command fails."""

    def __init__(self, message: str, code: str = "cache_error"):
        super().__init__(message, code)


class EmailServiceError(OtpGateError):
    """Raised when there is an issue with the email sending service.

    This could be due to configuration issues, network problems, or provider
    outages.
    """

    def __init__(self, message: str, code: str = "email_service_error"):
        super().__init__(message, code)


class TemplateRenderError(EmailServiceError):
    """Raised when an email template fails to render."""

    def __init__(self, message: str, code: str = "template_render_error"):
        super().__init__(message, code)
