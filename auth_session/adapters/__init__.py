"""
Adapters - Implementations of ports.

Identity backends (AuthRepositoryPort):
- HTTPAuthRepository: REST/JSON identity service over httpx
- MemoryAuthRepository: In-process backend (testing, demos)

Token persistence (TokenStorePort):
- MemoryTokenStore: In-memory (testing)
- RedisTokenStore: Redis-backed
"""

from auth_session.adapters.http_auth_repository import HTTPAuthRepository
from auth_session.adapters.memory_auth_repository import MemoryAuthRepository
from auth_session.adapters.memory_token_store import MemoryTokenStore
from auth_session.adapters.redis_token_store import RedisTokenStore

__all__ = [
    # Identity backends
    "HTTPAuthRepository",
    "MemoryAuthRepository",
    # Token persistence
    "MemoryTokenStore",
    "RedisTokenStore",
]
