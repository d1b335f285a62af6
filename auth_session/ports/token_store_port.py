"""
Token Store Port - Interface for session token persistence.

Implementations:
- MemoryTokenStore: Process-local (testing only)
- RedisTokenStore: Redis-backed, survives restarts
"""

from abc import ABC, abstractmethod
from typing import Optional


class TokenStorePort(ABC):
    """Port: Persist the single session token of this process."""

    @abstractmethod
    async def save(self, token: str) -> None:
        """
        Store the session token, replacing any previous one.

        Args:
            token: Opaque session token
        """
        pass

    @abstractmethod
    async def load(self) -> Optional[str]:
        """
        Load the stored session token.

        Returns:
            Token, or None if nothing is stored
        """
        pass

    @abstractmethod
    async def clear(self) -> bool:
        """
        Remove the stored token.

        Returns:
            True if a token was removed, False if none was stored
        """
        pass
