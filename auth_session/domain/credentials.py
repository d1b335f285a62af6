"""
Credential Domain Models - Login and registration payloads.

Transient value objects. Never persisted, never validated here
(validation belongs to the identity backend).
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional


@dataclass(frozen=True)
class Credentials:
    """
    Login credentials.

    Domain rules:
    - identifier is an email or a username
    - secret never appears in repr() (keeps it out of logs)
    """
    identifier: str
    secret: str = field(repr=False)


@dataclass(frozen=True)
class UserData:
    """
    Registration payload - used once per registration call.
    """
    identifier: str
    secret: str = field(repr=False)

    # Optional profile fields
    display_name: Optional[str] = None
    email: Optional[str] = None
    profile: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the wire dict sent to the identity backend."""
        payload = {
            "identifier": self.identifier,
            "password": self.secret,
        }
        if self.display_name is not None:
            payload["displayName"] = self.display_name
        if self.email is not None:
            payload["email"] = self.email
        if self.profile:
            payload["profile"] = dict(self.profile)
        return payload
