"""
Memory Auth Repository - In-process identity backend.

Behaves like a small identity service: accounts, signed session tokens,
reset codes and reset tokens. Used for tests, demos and offline work.
"""

import asyncio
import hashlib
import inspect
import itertools
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Set, Tuple, Union

import jwt

from auth_session.domain.credentials import Credentials, UserData
from auth_session.domain.errors import HttpError, NetworkError
from auth_session.domain.user import User
from auth_session.logging_setup import redact
from auth_session.ports.auth_repository_port import AuthRepositoryPort
from auth_session.ports.token_store_port import TokenStorePort

logger = logging.getLogger(__name__)

SESSION_PURPOSE = "session"
RESET_PURPOSE = "reset"


@dataclass
class _Account:
    user: User
    password_hash: str


class MemoryAuthRepository(AuthRepositoryPort):
    """
    In-memory identity backend.

    Session and reset tokens are JWTs (PyJWT) carrying a "purpose" claim.
    Secrets are stored as SHA-256 hashes. Revoked tokens are blacklisted.

    Failure simulation:
    - offline = True makes every call fail with a connectivity fault
    - fail_next(exc) raises exc from the next call only
    Both go through handle_error() like real transport faults.

    WARNING: Only for testing and development. Nothing survives a restart.
    """

    def __init__(
        self,
        token_store: TokenStorePort,
        secret: str = "auth-session-development-signing-key",
        algorithm: str = "HS256",
        issuer: str = "auth-session",
        token_ttl: int = 3600,
        reset_token_ttl: int = 900,
        reset_code_ttl: int = 600,
        latency: float = 0.0,
    ):
        """
        Initialize in-memory backend.

        Args:
            token_store: Where the session token is persisted
            secret: JWT signing secret
            algorithm: JWT algorithm (default HS256)
            issuer: Token issuer claim
            token_ttl: Session token lifetime in seconds
            reset_token_ttl: Reset token lifetime in seconds
            reset_code_ttl: Reset code lifetime in seconds
            latency: Seconds each call waits before answering
        """
        self._token_store = token_store
        self._secret = secret
        self._algorithm = algorithm
        self._issuer = issuer
        self._token_ttl = token_ttl
        self._reset_token_ttl = reset_token_ttl
        self._reset_code_ttl = reset_code_ttl
        self.latency = latency

        self._accounts: Dict[str, _Account] = {}  # {user_id: account}
        self._reset_codes: Dict[str, Tuple[str, datetime]] = {}  # {email: (code, expires)}
        self._revoked: Set[str] = set()
        self._ids = itertools.count(1)

        self.offline = False
        self._next_failure: Optional[BaseException] = None

    # -- failure simulation ------------------------------------------------

    def fail_next(self, error: BaseException) -> None:
        """Raise error (raw, then classified) from the next call."""
        self._next_failure = error

    async def _call(self, operation, *args):
        """Run one backend operation, normalizing every failure."""
        try:
            if self.latency:
                await asyncio.sleep(self.latency)
            if self._next_failure is not None:
                failure, self._next_failure = self._next_failure, None
                raise failure
            if self.offline:
                raise ConnectionError("identity backend unreachable")

            result = operation(*args)
            if inspect.isawaitable(result):
                result = await result
            return result
        except Exception as exc:
            error = self.handle_error(exc)
            if error is exc:
                raise
            raise error from exc

    # -- account helpers ---------------------------------------------------

    @staticmethod
    def _hash_secret(secret: str) -> str:
        """Hash a secret with SHA-256."""
        return hashlib.sha256(secret.encode()).hexdigest()

    def _find(self, identifier: str) -> Optional[_Account]:
        """Look an account up by identifier or email (case-insensitive)."""
        wanted = identifier.strip().lower()
        for account in self._accounts.values():
            user = account.user
            if user.identifier.lower() == wanted:
                return account
            if user.email and user.email.lower() == wanted:
                return account
        return None

    def add_user(
        self,
        identifier: str,
        secret: str,
        display_name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> User:
        """
        Seed an account directly (no simulated failures).

        Returns:
            Created user
        """
        return self._register(
            UserData(identifier=identifier, secret=secret, display_name=display_name, email=email)
        )

    @property
    def issued_reset_codes(self) -> Dict[str, str]:
        """Outstanding reset codes by email - what the reset emails would carry."""
        return {email: code for email, (code, _) in self._reset_codes.items()}

    # -- tokens ------------------------------------------------------------

    def _issue(self, user: User, purpose: str, ttl: int) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user.user_id,
            "purpose": purpose,
            "jti": secrets.token_hex(8),
            "iat": now,
            "exp": now + timedelta(seconds=ttl),
            "iss": self._issuer,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def _decode(self, token: str, purpose: str) -> _Account:
        """
        Validate a token and return its account.

        Raises:
            HttpError: 401 if revoked, wrong purpose or unknown subject
            jwt.InvalidTokenError: Bad signature, expired, malformed
        """
        if token in self._revoked:
            raise HttpError(401, "Token has been revoked", "token_revoked")

        claims = jwt.decode(
            token,
            self._secret,
            algorithms=[self._algorithm],
            issuer=self._issuer,
        )
        if claims.get("purpose") != purpose:
            raise HttpError(401, "Token not valid for this operation", "invalid_token")

        account = self._accounts.get(claims["sub"])
        if account is None:
            raise HttpError(401, "Unknown token subject", "invalid_token")
        return account

    # -- backend operations (sync bodies, run through _call) ----------------

    def _login(self, credentials: Credentials) -> str:
        account = self._find(credentials.identifier)
        if account is None or account.password_hash != self._hash_secret(credentials.secret):
            raise HttpError(401, "Invalid credentials", "invalid_credentials")
        logger.debug("Issued session token for user %s", account.user.user_id)
        return self._issue(account.user, SESSION_PURPOSE, self._token_ttl)

    def _register(self, user_data: UserData) -> User:
        if not user_data.identifier or not user_data.secret:
            raise HttpError(422, "Identifier and password are required", "validation_error")
        if self._find(user_data.identifier) is not None:
            raise HttpError(409, "Account already exists", "duplicate_identifier")
        if user_data.email and self._find(user_data.email) is not None:
            raise HttpError(409, "Email already registered", "duplicate_email")

        user = User(
            user_id=str(next(self._ids)),
            identifier=user_data.identifier,
            display_name=user_data.display_name,
            email=user_data.email,
            metadata=dict(user_data.profile),
        )
        self._accounts[user.user_id] = _Account(user, self._hash_secret(user_data.secret))
        return user

    def _forgot_password(self, email: str) -> None:
        account = self._find(email)
        if account is None:
            raise HttpError(404, "No account for this email", "unknown_email")
        code = f"{secrets.randbelow(10 ** 6):06d}"
        expires = datetime.now(timezone.utc) + timedelta(seconds=self._reset_code_ttl)
        self._reset_codes[email.strip().lower()] = (code, expires)
        logger.info("Reset code issued for user %s", account.user.user_id)

    def _verify_reset_code(self, email: str, code: str) -> str:
        key = email.strip().lower()
        issued = self._reset_codes.get(key)
        if issued is None:
            raise HttpError(400, "Invalid or expired reset code", "invalid_code")

        expected, expires = issued
        if datetime.now(timezone.utc) >= expires:
            del self._reset_codes[key]
            raise HttpError(400, "Invalid or expired reset code", "expired_code")
        if not secrets.compare_digest(expected, str(code)):
            raise HttpError(400, "Invalid or expired reset code", "invalid_code")

        account = self._find(email)
        if account is None:
            raise HttpError(400, "Invalid or expired reset code", "invalid_code")

        del self._reset_codes[key]
        return self._issue(account.user, RESET_PURPOSE, self._reset_token_ttl)

    def _change_password(self, email: str, new_password: str, reset_token: str) -> None:
        account = self._decode(reset_token, RESET_PURPOSE)
        if account is not self._find(email):
            raise HttpError(401, "Reset token does not match this account", "invalid_token")
        if not new_password:
            raise HttpError(422, "Password is required", "validation_error")

        account.password_hash = self._hash_secret(new_password)
        # Reset tokens are single use
        self._revoked.add(reset_token)

    def _fetch_user(self, token: str) -> User:
        return self._decode(token, SESSION_PURPOSE).user

    async def _sign_out(self, token: Optional[str] = None) -> None:
        if token is None:
            token = await self._token_store.load()
        if not token:
            return
        self._revoked.add(token)
        logger.debug("Revoked session token %s", redact(token))

    async def _check_auth_status(self) -> Optional[User]:
        token = await self._token_store.load()
        if not token:
            return None
        try:
            return self._fetch_user(token)
        except (HttpError, jwt.InvalidTokenError) as exc:
            logger.info("Stored token %s rejected (%s), clearing it", redact(token), exc)
            await self._token_store.clear()
            return None

    # -- AuthRepositoryPort ------------------------------------------------

    async def login(self, credentials: Credentials) -> str:
        return await self._call(self._login, credentials)

    async def register(self, user_data: UserData) -> None:
        await self._call(self._register, user_data)

    async def forgot_password(self, email: str) -> None:
        await self._call(self._forgot_password, email)

    async def verify_reset_code(self, email: str, code: str) -> str:
        return await self._call(self._verify_reset_code, email, code)

    async def change_password(self, email: str, new_password: str, reset_token: str) -> None:
        await self._call(self._change_password, email, new_password, reset_token)

    async def fetch_user(self, token: str) -> User:
        return await self._call(self._fetch_user, token)

    async def sign_out(self, token: Optional[str] = None) -> None:
        await self._call(self._sign_out, token)

    async def check_auth_status(self) -> Optional[User]:
        return await self._call(self._check_auth_status)

    def handle_error(self, error: BaseException) -> Union[HttpError, NetworkError]:
        if isinstance(error, (HttpError, NetworkError)):
            return error

        if isinstance(error, jwt.ExpiredSignatureError):
            return HttpError(401, "Token has expired", "token_expired")
        if isinstance(error, jwt.InvalidTokenError):
            return HttpError(401, "Invalid token", "invalid_token")

        if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
            return NetworkError(f"Request timed out: {error}")
        if isinstance(error, (ConnectionError, OSError)):
            return NetworkError(f"Could not reach identity service: {error}")

        return NetworkError(f"Unexpected failure talking to identity service: {error!r}")
