"""
Basic Session Example - Register, sign in, restart, sign out (in-memory backend).
"""

import asyncio

from auth_session import Credentials, SessionContext, UserData
from auth_session.adapters import MemoryAuthRepository, MemoryTokenStore
from auth_session.logging_setup import setup_logging


async def main():
    setup_logging()

    # Shared token store = persistence that survives the "restart" below
    tokens = MemoryTokenStore()
    backend = MemoryAuthRepository(tokens)

    context = SessionContext(backend, tokens)
    context.subscribe(lambda state: print(f"  state -> {state.status.value} (loading={state.is_loading})"))

    print("Startup:")
    await context.initialize()

    # Register (does not sign in)
    await context.register_user(
        UserData(identifier="alice", secret="s3cret", display_name="Alice", email="alice@example.com")
    )
    print("\nRegistered alice")

    # Sign in
    print("\nSign in:")
    user = await context.sign_in(Credentials(identifier="alice@example.com", secret="s3cret"))
    print(f"Signed in as {user.label} (id={user.user_id})")

    # Restart with persistence intact
    print("\nRestart:")
    restarted = SessionContext(backend, tokens)
    state = await restarted.initialize()
    print(f"Restored session for: {state.user.label if state.user else None}")

    # Sign out
    print("\nSign out:")
    await restarted.sign_out()
    print(f"Authenticated after sign-out: {restarted.is_authenticated}")


if __name__ == "__main__":
    asyncio.run(main())
