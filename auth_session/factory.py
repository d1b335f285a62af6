"""
Factory - Wire adapters into a session context from settings.

Backends are chosen here, once, at construction time.
"""

import logging
from typing import Optional

from auth_session.adapters.http_auth_repository import HTTPAuthRepository
from auth_session.adapters.memory_auth_repository import MemoryAuthRepository
from auth_session.adapters.memory_token_store import MemoryTokenStore
from auth_session.adapters.redis_token_store import RedisTokenStore
from auth_session.config import AuthSettings
from auth_session.context.session_context import SessionContext
from auth_session.ports.auth_repository_port import AuthRepositoryPort
from auth_session.ports.token_store_port import TokenStorePort

logger = logging.getLogger(__name__)


def build_token_store(settings: AuthSettings) -> TokenStorePort:
    """Create the token store named by settings.token_store."""
    if settings.token_store == "redis":
        return RedisTokenStore(
            redis_url=settings.redis_url,
            key=settings.token_key,
            ttl=settings.token_ttl,
        )
    return MemoryTokenStore()


def build_repository(settings: AuthSettings, token_store: TokenStorePort) -> AuthRepositoryPort:
    """Create the identity backend named by settings.backend."""
    if settings.backend == "http":
        return HTTPAuthRepository(
            token_store=token_store,
            base_url=settings.base_url,
            timeout=settings.timeout,
        )
    return MemoryAuthRepository(
        token_store=token_store,
        secret=settings.jwt_secret,
        token_ttl=settings.token_ttl or 3600,
        reset_token_ttl=settings.reset_token_ttl,
    )


def build_session_context(settings: Optional[AuthSettings] = None) -> SessionContext:
    """
    Build a ready-to-initialize session context.

    Args:
        settings: Settings to use (default: AuthSettings.from_env())

    Returns:
        SessionContext in the UNKNOWN state; await initialize() next
    """
    if settings is None:
        settings = AuthSettings.from_env()

    token_store = build_token_store(settings)
    repository = build_repository(settings, token_store)
    logger.debug(
        "Session context built (backend=%s, token_store=%s)",
        settings.backend,
        settings.token_store,
    )
    return SessionContext(repository=repository, token_store=token_store)
