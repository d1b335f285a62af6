"""
Context - The session state machine exposed to the UI layer.
"""

from auth_session.context.session_context import SessionContext

__all__ = [
    "SessionContext",
]
