from .user import UserOut, UserResponse

__all__ = ["UserOut", "UserResponse"]
