"""
User Domain Model - The authenticated principal.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional


@dataclass(frozen=True)
class User:
    """
    User entity - represents the signed-in principal.

    Domain rules:
    - user_id is immutable (the whole entity is frozen)
    - Owned by the session context; created on sign-in or restoration,
      dropped on sign-out
    """
    user_id: str
    identifier: str

    # Display attributes
    display_name: Optional[str] = None
    email: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def label(self) -> str:
        """Name to show in the UI."""
        return self.display_name or self.identifier

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        return {
            "user_id": self.user_id,
            "identifier": self.identifier,
            "display_name": self.display_name,
            "email": self.email,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        """
        Deserialize from dict.

        Accepts both our own to_dict() output and backend payloads, which
        key the id as "id" and may use camelCase display fields.

        Raises:
            KeyError: If no id is present
        """
        user_id = data["user_id"] if "user_id" in data else data["id"]
        identifier = (
            data.get("identifier")
            or data.get("username")
            or data.get("email")
            or str(user_id)
        )
        return cls(
            user_id=str(user_id),
            identifier=identifier,
            display_name=data.get("display_name", data.get("displayName")),
            email=data.get("email"),
            metadata=data.get("metadata", {}),
        )
