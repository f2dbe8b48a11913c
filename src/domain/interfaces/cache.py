"""Key-value cache interface.

The cache is a generic collaborator: the OTP guard builds single-use,
time-bounded codes on top of these primitives without knowing the backend.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional


class CompareAndDeleteResult(str, Enum):
    """Outcome of an atomic compare-and-delete."""

    DELETED = "deleted"
    MISMATCH = "mismatch"
    MISSING = "missing"


class ICacheService(ABC):
    """Interface for generic caching operations.

    Every method raises `CacheError` when the backend is unreachable or the
    command fails, so callers can tell infrastructure failures apart from
    absent keys.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Retrieves a value from the cache by its key.

        Returns:
            The cached value, or None if the key is absent or expired.
        """
        raise NotImplementedError

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Stores a value, replacing any existing one, with a time-to-live."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Removes a key. Deleting an absent key is not an error."""
        raise NotImplementedError

    @abstractmethod
    async def compare_and_delete(self, key: str, expected: str) -> CompareAndDeleteResult:
        """Deletes `key` only if its live value equals `expected`.

        The comparison and the deletion must happen as one atomic operation:
        of several concurrent callers presenting the same value, at most one
        observes `DELETED`.
        """
        raise NotImplementedError
