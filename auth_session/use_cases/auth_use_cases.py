"""
Auth Use Cases - One stateless coroutine per intent.

Each use case takes the repository as its first argument, makes exactly
one repository call and lets classified errors propagate unchanged.
No retries: retry policy belongs to the caller.
"""

import logging
from typing import Optional

from auth_session.domain.credentials import Credentials, UserData
from auth_session.domain.errors import AuthError
from auth_session.domain.user import User
from auth_session.logging_setup import redact
from auth_session.ports.auth_repository_port import AuthRepositoryPort

logger = logging.getLogger(__name__)


async def login_user(repository: AuthRepositoryPort, credentials: Credentials) -> str:
    """
    Exchange credentials for a session token.

    Returns:
        Session token

    Raises:
        HttpError, NetworkError: From the repository, unchanged
    """
    logger.debug("Logging in %s", credentials.identifier)
    try:
        token = await repository.login(credentials)
    except AuthError as exc:
        logger.debug("Login failed for %s: %s", credentials.identifier, exc)
        raise
    logger.debug("Login succeeded for %s, token %s", credentials.identifier, redact(token))
    return token


async def register_user(repository: AuthRepositoryPort, user_data: UserData) -> None:
    """Create an account. Does not sign in."""
    logger.debug("Registering %s", user_data.identifier)
    await repository.register(user_data)
    logger.info("Registered account %s", user_data.identifier)


async def forgot_password(repository: AuthRepositoryPort, email: str) -> None:
    """Ask the backend to send a reset code."""
    logger.debug("Requesting password reset for %s", email)
    await repository.forgot_password(email)


async def send_reset_code(repository: AuthRepositoryPort, email: str) -> bool:
    """Same as forgot_password(), returns True on success."""
    logger.debug("Sending reset code to %s", email)
    return await repository.send_reset_code(email)


async def verify_reset_code(repository: AuthRepositoryPort, email: str, code: str) -> str:
    """
    Exchange a reset code for a reset token.

    Returns:
        Reset token for reset_password()
    """
    logger.debug("Verifying reset code for %s", email)
    reset_token = await repository.verify_reset_code(email, code)
    logger.debug("Reset code accepted for %s", email)
    return reset_token


async def reset_password(
    repository: AuthRepositoryPort,
    email: str,
    new_password: str,
    reset_token: str,
) -> None:
    """Finalize a password reset with a verified reset token."""
    logger.debug("Changing password for %s", email)
    await repository.change_password(email, new_password, reset_token)
    logger.info("Password changed for %s", email)


async def fetch_current_user(repository: AuthRepositoryPort, token: str) -> User:
    """Resolve the user behind a session token."""
    user = await repository.fetch_user(token)
    logger.debug("Token %s belongs to user %s", redact(token), user.user_id)
    return user


async def sign_out_user(repository: AuthRepositoryPort, token: Optional[str] = None) -> None:
    """Invalidate a session on the backend (the persisted one by default)."""
    if token is None:
        logger.debug("Signing out")
        await repository.sign_out()
    else:
        logger.debug("Invalidating session token %s", redact(token))
        await repository.sign_out(token)


async def check_auth_status(repository: AuthRepositoryPort) -> Optional[User]:
    """
    Restore a session from persisted credentials.

    Returns:
        User if a valid session was found, None otherwise
    """
    user = await repository.check_auth_status()
    if user is None:
        logger.debug("No persisted session")
    else:
        logger.debug("Persisted session belongs to user %s", user.user_id)
    return user
