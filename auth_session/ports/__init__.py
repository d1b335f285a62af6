"""
Ports - Interfaces for the identity backend and token persistence.

Hexagonal architecture: These define WHAT we need, not HOW.
Adapters provide the HOW.
"""

from auth_session.ports.auth_repository_port import AuthRepositoryPort
from auth_session.ports.token_store_port import TokenStorePort

__all__ = [
    "AuthRepositoryPort",
    "TokenStorePort",
]
