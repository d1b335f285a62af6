"""
HTTP Auth Repository - Implements AuthRepositoryPort against a REST identity service.
"""

import logging
from typing import Any, Dict, Optional, Tuple, Union

import httpx

from auth_session.domain.credentials import Credentials, UserData
from auth_session.domain.errors import HttpError, NetworkError
from auth_session.domain.user import User
from auth_session.logging_setup import redact
from auth_session.ports.auth_repository_port import AuthRepositoryPort
from auth_session.ports.token_store_port import TokenStorePort

logger = logging.getLogger(__name__)

DEFAULT_PATHS = {
    "login": "/auth/login",
    "register": "/auth/register",
    "forgot_password": "/auth/forgot-password",
    "verify_reset_code": "/auth/verify-reset-code",
    "reset_password": "/auth/reset-password",
    "me": "/auth/me",
    "logout": "/auth/logout",
}


class HTTPAuthRepository(AuthRepositoryPort):
    """
    REST/JSON identity backend.

    Uses httpx.AsyncClient. Session tokens travel as Bearer headers; the
    persisted token is read from the injected token store.
    """

    def __init__(
        self,
        token_store: TokenStorePort,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
        paths: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize HTTP repository.

        Args:
            token_store: Where the session token is persisted
            base_url: Identity service root URL (ignored if http_client given)
            timeout: Request timeout in seconds
            http_client: Preconfigured client (tests pass one with a MockTransport)
            paths: Overrides for DEFAULT_PATHS entries
        """
        if http_client is None and not base_url:
            raise ValueError("base_url or http_client is required")

        self._token_store = token_store
        self._base_url = base_url
        self._timeout = timeout
        self._client = http_client
        self._owns_client = http_client is None
        self._paths = {**DEFAULT_PATHS, **(paths or {})}

    def _get_client(self) -> httpx.AsyncClient:
        """Lazy create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout)
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if this repository created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        endpoint: str,
        payload: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None,
    ) -> Any:
        """
        Send one request and decode the JSON body.

        Returns:
            Decoded body, or None for an empty body

        Raises:
            HttpError, NetworkError: Classified through handle_error()
        """
        path = self._paths[endpoint]
        headers = {"Authorization": f"Bearer {token}"} if token else None

        try:
            response = await self._get_client().request(
                method, path, json=payload, headers=headers
            )
            response.raise_for_status()
            if not response.content:
                return None
            return response.json()
        except Exception as exc:
            error = self.handle_error(exc)
            logger.debug("%s %s failed: %r", method, path, error)
            raise error from exc

    @staticmethod
    def _field(data: Any, *names: str) -> Any:
        """First present field of a JSON object, else a malformed-response error."""
        if isinstance(data, dict):
            for name in names:
                if data.get(name) is not None:
                    return data[name]
        raise NetworkError(f"Malformed response: expected one of {', '.join(names)}")

    async def _load_token(self) -> Optional[str]:
        try:
            return await self._token_store.load()
        except Exception as exc:
            raise self.handle_error(exc) from exc

    async def login(self, credentials: Credentials) -> str:
        data = await self._request(
            "POST",
            "login",
            payload={"identifier": credentials.identifier, "password": credentials.secret},
        )
        return self._field(data, "token", "accessToken", "access_token")

    async def register(self, user_data: UserData) -> None:
        await self._request("POST", "register", payload=user_data.to_payload())

    async def forgot_password(self, email: str) -> None:
        await self._request("POST", "forgot_password", payload={"email": email})

    async def verify_reset_code(self, email: str, code: str) -> str:
        data = await self._request(
            "POST", "verify_reset_code", payload={"email": email, "code": code}
        )
        return self._field(data, "resetToken", "reset_token", "token")

    async def change_password(self, email: str, new_password: str, reset_token: str) -> None:
        await self._request(
            "POST",
            "reset_password",
            payload={"email": email, "password": new_password, "token": reset_token},
        )

    async def fetch_user(self, token: str) -> User:
        data = await self._request("GET", "me", token=token)
        if isinstance(data, dict) and isinstance(data.get("user"), dict):
            data = data["user"]
        try:
            return User.from_dict(data)
        except (KeyError, TypeError, AttributeError) as exc:
            raise NetworkError(f"Malformed user payload: {exc!r}") from exc

    async def sign_out(self, token: Optional[str] = None) -> None:
        if token is None:
            token = await self._load_token()
        if not token:
            logger.debug("No stored token, nothing to invalidate remotely")
            return
        await self._request("POST", "logout", token=token)
        logger.debug("Token %s invalidated remotely", redact(token))

    async def check_auth_status(self) -> Optional[User]:
        token = await self._load_token()
        if not token:
            return None

        try:
            return await self.fetch_user(token)
        except HttpError as exc:
            if not exc.is_unauthorized:
                raise
            logger.info("Stored token %s rejected by backend, clearing it", redact(token))
            try:
                await self._token_store.clear()
            except Exception as clear_exc:
                raise self.handle_error(clear_exc) from clear_exc
            return None

    def handle_error(self, error: BaseException) -> Union[HttpError, NetworkError]:
        if isinstance(error, (HttpError, NetworkError)):
            return error

        if isinstance(error, httpx.HTTPStatusError):
            status = error.response.status_code
            message, code = self._error_details(error.response)
            return HttpError(status, message, code)

        if isinstance(error, httpx.TimeoutException):
            return NetworkError(f"Request timed out: {error}")

        if isinstance(error, httpx.RequestError):
            return NetworkError(f"Could not reach identity service: {error}")

        # json.JSONDecodeError is a ValueError
        if isinstance(error, ValueError):
            return NetworkError(f"Malformed response from identity service: {error}")

        return NetworkError(f"Unexpected failure talking to identity service: {error!r}")

    @staticmethod
    def _error_details(response: httpx.Response) -> Tuple[str, Optional[str]]:
        """Extract (message, code) from an error response body."""
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            message = body.get("message") or body.get("error") or body.get("detail")
            code = body.get("code")
            if message:
                return str(message), str(code) if code is not None else None
            if code is not None:
                return response.reason_phrase or "Request rejected", str(code)

        return response.text or response.reason_phrase or "Request rejected", None
