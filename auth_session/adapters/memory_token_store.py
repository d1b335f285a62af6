"""
Memory Token Store - In-memory token persistence (testing only).
"""

from typing import Optional
from auth_session.ports.token_store_port import TokenStorePort


class MemoryTokenStore(TokenStorePort):
    """
    In-memory token storage.

    WARNING: Only for testing. The token is lost on restart, so a new
    process can only "restore" a session if it shares this instance.
    """

    def __init__(self, token: Optional[str] = None):
        """Initialize, optionally pre-seeded with a token."""
        self._token = token

    async def save(self, token: str) -> None:
        self._token = token

    async def load(self) -> Optional[str]:
        return self._token

    async def clear(self) -> bool:
        if self._token is None:
            return False
        self._token = None
        return True
