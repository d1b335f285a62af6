"""
Domain Models - Pure value objects and the error taxonomy.

No infrastructure dependencies.
"""

from auth_session.domain.credentials import Credentials, UserData
from auth_session.domain.user import User
from auth_session.domain.session import SessionState, AuthStatus
from auth_session.domain.errors import AuthError, HttpError, NetworkError

__all__ = [
    "Credentials",
    "UserData",
    "User",
    "SessionState",
    "AuthStatus",
    "AuthError",
    "HttpError",
    "NetworkError",
]
