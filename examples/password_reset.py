"""
Password Reset Example - Forgot password, verify code, set a new password.
"""

import asyncio

from auth_session import AuthSettings, Credentials, HttpError, SessionContext
from auth_session.factory import build_repository, build_token_store
from auth_session.logging_setup import setup_logging


async def main():
    setup_logging()

    settings = AuthSettings(backend="memory")
    tokens = build_token_store(settings)
    backend = build_repository(settings, tokens)
    context = SessionContext(backend, tokens)
    await context.initialize()

    # Seed an account on the in-process backend
    backend.add_user("bob", "old-password", email="bob@example.com")

    sent = await context.send_reset_password_email("bob@example.com")
    print(f"Reset email sent: {sent}")

    # The code the email would carry
    code = backend.issued_reset_codes["bob@example.com"]

    try:
        await context.verify_reset_code("bob@example.com", "not-the-code")
    except HttpError as exc:
        print(f"Wrong code rejected: {exc}")

    reset_token = await context.verify_reset_code("bob@example.com", code)
    await context.reset_password("bob@example.com", "new-password", reset_token)
    print("Password changed")

    try:
        await context.sign_in(Credentials("bob", "old-password"))
    except HttpError as exc:
        print(f"Old password rejected: {exc}")

    user = await context.sign_in(Credentials("bob", "new-password"))
    print(f"Signed in with new password as {user.label}")


if __name__ == "__main__":
    asyncio.run(main())
