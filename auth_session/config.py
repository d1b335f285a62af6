"""
Settings - Environment driven configuration.

Every setting reads from an environment variable with a common prefix
(default AUTH_SESSION_), e.g. AUTH_SESSION_BASE_URL.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

BACKENDS = ("memory", "http")
TOKEN_STORES = ("memory", "redis")


@dataclass
class AuthSettings:
    """
    Settings for building a session context.

    backend: "http" talks to a REST identity service at base_url,
             "memory" runs the in-process backend
    token_store: "memory" or "redis"
    """
    backend: str = "memory"
    base_url: Optional[str] = None
    timeout: float = 10.0

    token_store: str = "memory"
    redis_url: str = "redis://localhost:6379/0"
    token_key: str = "auth_session:token"
    token_ttl: Optional[int] = None  # seconds, None = no expiry

    # In-process backend only
    jwt_secret: str = "auth-session-development-signing-key"
    reset_token_ttl: int = 900

    def __post_init__(self):
        self.validate()

    def validate(self):
        """
        Check settings are consistent.

        Raises:
            ValueError: Unknown backend/store, or http backend without base_url
        """
        if self.backend not in BACKENDS:
            raise ValueError(f"Unknown backend {self.backend!r}, expected one of {BACKENDS}")
        if self.token_store not in TOKEN_STORES:
            raise ValueError(
                f"Unknown token store {self.token_store!r}, expected one of {TOKEN_STORES}"
            )
        if self.backend == "http" and not self.base_url:
            raise ValueError("base_url is required for the http backend")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.reset_token_ttl <= 0:
            raise ValueError("reset_token_ttl must be positive")

    @classmethod
    def from_env(
        cls,
        prefix: str = "AUTH_SESSION_",
        environ: Optional[Mapping[str, str]] = None,
    ) -> "AuthSettings":
        """
        Load settings from environment variables.

        Args:
            prefix: Variable name prefix
            environ: Mapping to read instead of os.environ

        Returns:
            Settings, defaults filled in for unset variables

        Raises:
            ValueError: Malformed number or invalid choice
        """
        env = os.environ if environ is None else environ

        def get(name: str, default=None):
            value = env.get(f"{prefix}{name}")
            return default if value in (None, "") else value

        def number(name: str, convert, default):
            raw = get(name)
            if raw is None:
                return default
            try:
                return convert(raw)
            except ValueError:
                raise ValueError(f"{prefix}{name} must be a number, got {raw!r}")

        defaults = cls.__dataclass_fields__
        return cls(
            backend=get("BACKEND", defaults["backend"].default).lower(),
            base_url=get("BASE_URL"),
            timeout=number("TIMEOUT", float, defaults["timeout"].default),
            token_store=get("TOKEN_STORE", defaults["token_store"].default).lower(),
            redis_url=get("REDIS_URL", defaults["redis_url"].default),
            token_key=get("TOKEN_KEY", defaults["token_key"].default),
            token_ttl=number("TOKEN_TTL", int, None),
            jwt_secret=get("JWT_SECRET", defaults["jwt_secret"].default),
            reset_token_ttl=number("RESET_TOKEN_TTL", int, defaults["reset_token_ttl"].default),
        )
