"""Response Pydantic models for user data."""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from src.domain.entities.auth_user import AuthUser


class UserOut(BaseModel):
    """Serialised representation of :class:`~src.domain.entities.auth_user.AuthUser`.

    `id` and `email` are always present; the provider's extensible fields
    (role, metadata, timestamps) are passed through as extra keys.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    email: str

    @classmethod
    def from_entity(cls, user: AuthUser) -> "UserOut":
        return cls(**user.to_dict())


class UserResponse(BaseModel):
    """Envelope returned by ``/auth/otp/verify`` and ``/auth/me``."""

    user: Optional[UserOut] = None
