"""
Auth Session - Client-side authentication session management

Hexagonal architecture: a session context (state machine) drives
stateless use cases against an injected identity backend.

Usage:
    from auth_session import SessionContext, Credentials
    from auth_session.adapters import HTTPAuthRepository, MemoryTokenStore

    tokens = MemoryTokenStore()
    backend = HTTPAuthRepository(tokens, base_url="https://id.example.com")
    context = SessionContext(backend, tokens)

    # Restore a persisted session at startup
    await context.initialize()

    # Sign in
    await context.sign_in(Credentials("alice@example.com", "s3cret"))
"""

__version__ = "0.1.0"

from auth_session.domain.credentials import Credentials, UserData
from auth_session.domain.user import User
from auth_session.domain.session import SessionState, AuthStatus
from auth_session.domain.errors import AuthError, HttpError, NetworkError
from auth_session.context.session_context import SessionContext
from auth_session.config import AuthSettings
from auth_session.factory import build_session_context

__all__ = [
    "SessionContext",
    "Credentials",
    "UserData",
    "User",
    "SessionState",
    "AuthStatus",
    "AuthError",
    "HttpError",
    "NetworkError",
    "AuthSettings",
    "build_session_context",
]
