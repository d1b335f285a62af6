"""
Error taxonomy.

Every failure leaving a repository is exactly one of:
- HttpError: the service answered and rejected the request
- NetworkError: the request never completed against the service
"""

from typing import Optional


class AuthError(Exception):
    """Base class for classified auth failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class HttpError(AuthError):
    """
    The remote service responded but rejected the request.

    Examples: invalid credentials (401), duplicate account (409),
    invalid or expired reset code (400).
    """

    def __init__(self, status: int, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.code = code

    @property
    def is_unauthorized(self) -> bool:
        return self.status == 401

    def __str__(self) -> str:
        if self.code:
            return f"HTTP {self.status} ({self.code}): {self.message}"
        return f"HTTP {self.status}: {self.message}"

    def __repr__(self) -> str:
        return f"HttpError(status={self.status!r}, message={self.message!r}, code={self.code!r})"


class NetworkError(AuthError):
    """
    The request could not reach or complete against the remote service.

    Timeouts, connectivity loss, malformed transport responses.
    Says nothing about credential validity.
    """

    def __repr__(self) -> str:
        return f"NetworkError(message={self.message!r})"
