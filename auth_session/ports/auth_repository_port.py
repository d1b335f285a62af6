"""
Auth Repository Port - Interface to the remote identity service.

Implementations:
- HTTPAuthRepository: REST/JSON backend over httpx
- MemoryAuthRepository: In-process backend (testing, demos, offline dev)
"""

from abc import ABC, abstractmethod
from typing import Optional, Union
from auth_session.domain.credentials import Credentials, UserData
from auth_session.domain.errors import HttpError, NetworkError
from auth_session.domain.user import User


class AuthRepositoryPort(ABC):
    """
    Port: Talk to the identity backend.

    Every operation is a coroutine. Every failure raised out of an
    implementation must already be classified (HttpError or NetworkError);
    handle_error() is where raw failures get normalized.
    Implementations never retry.
    """

    @abstractmethod
    async def login(self, credentials: Credentials) -> str:
        """
        Exchange credentials for a session token.

        Args:
            credentials: Identifier and secret

        Returns:
            Opaque session token

        Raises:
            HttpError: Invalid credentials or backend rejection
            NetworkError: Backend unreachable
        """
        pass

    @abstractmethod
    async def register(self, user_data: UserData) -> None:
        """
        Create an account. Does not sign the user in.

        Raises:
            HttpError: Duplicate identifier or validation failure
            NetworkError: Backend unreachable
        """
        pass

    @abstractmethod
    async def forgot_password(self, email: str) -> None:
        """
        Ask the backend to email a password reset code.

        Raises:
            HttpError: Unknown email or backend rejection
            NetworkError: Backend unreachable
        """
        pass

    async def send_reset_code(self, email: str) -> bool:
        """
        Same operation as forgot_password(), reported as a success flag.

        Returns:
            True once the backend accepted the request. Failures raise,
            they never come back as False.
        """
        await self.forgot_password(email)
        return True

    @abstractmethod
    async def verify_reset_code(self, email: str, code: str) -> str:
        """
        Exchange a reset code for a short-lived reset token.

        Returns:
            Reset token, required by change_password()

        Raises:
            HttpError: Invalid or expired code
        """
        pass

    @abstractmethod
    async def change_password(self, email: str, new_password: str, reset_token: str) -> None:
        """
        Finalize a password reset.

        Raises:
            HttpError: Reset token invalid or expired
        """
        pass

    @abstractmethod
    async def fetch_user(self, token: str) -> User:
        """
        Resolve the user a session token belongs to.

        Raises:
            HttpError: Token rejected (401)
            NetworkError: Backend unreachable or malformed user payload
        """
        pass

    @abstractmethod
    async def sign_out(self, token: Optional[str] = None) -> None:
        """
        Invalidate a session token on the backend.

        Args:
            token: Token to invalidate (default: the persisted token)

        Does not clear local persistence; the session context does that.
        """
        pass

    @abstractmethod
    async def check_auth_status(self) -> Optional[User]:
        """
        Restore a session from the persisted token.

        Returns:
            User if the stored token is still valid, None if no token is
            stored or the backend rejects it. "No session" is never an error.

        Raises:
            NetworkError: Backend unreachable
        """
        pass

    @abstractmethod
    def handle_error(self, error: BaseException) -> Union[HttpError, NetworkError]:
        """
        Classify a raw failure.

        Args:
            error: Any exception raised while talking to the backend

        Returns:
            Exactly one of HttpError or NetworkError. Already classified
            errors are returned unchanged.
        """
        pass
