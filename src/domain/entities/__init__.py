"""Export authentication-related domain entities for use across the application."""

from .auth_user import AuthUser

__all__ = ["AuthUser"]
