"""
Session State Domain Model - Snapshot of the process-wide auth state.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional
from enum import Enum

from auth_session.domain.user import User


class AuthStatus(Enum):
    """Session lifecycle states."""
    UNKNOWN = "unknown"                  # Startup, restoration not finished
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class SessionState:
    """
    Immutable snapshot of the session.

    Domain rules:
    - is_authenticated is derived from user, never stored
    - UNKNOWN only until the startup restoration check completes
    """
    user: Optional[User] = None
    is_loading: bool = True
    initialized: bool = False

    @classmethod
    def initial(cls) -> "SessionState":
        """State at application start: loading, no user."""
        return cls(user=None, is_loading=True, initialized=False)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def status(self) -> AuthStatus:
        if self.user is not None:
            return AuthStatus.AUTHENTICATED
        if not self.initialized:
            return AuthStatus.UNKNOWN
        return AuthStatus.UNAUTHENTICATED

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        return {
            "user": self.user.to_dict() if self.user else None,
            "is_authenticated": self.is_authenticated,
            "is_loading": self.is_loading,
            "status": self.status.value,
        }
