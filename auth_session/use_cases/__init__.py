"""
Use Cases - Stateless orchestration of single auth intents.
"""

from auth_session.use_cases.auth_use_cases import (
    login_user,
    register_user,
    forgot_password,
    send_reset_code,
    verify_reset_code,
    reset_password,
    fetch_current_user,
    sign_out_user,
    check_auth_status,
)

__all__ = [
    "login_user",
    "register_user",
    "forgot_password",
    "send_reset_code",
    "verify_reset_code",
    "reset_password",
    "fetch_current_user",
    "sign_out_user",
    "check_auth_status",
]
