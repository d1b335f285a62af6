"""
Integration tests for complete session flows.

Session context + use cases + in-memory backend, no stubs.
"""

import asyncio

import httpx
import pytest
from auth_session import AuthStatus, Credentials, SessionContext, UserData
from auth_session.adapters import HTTPAuthRepository, MemoryAuthRepository, MemoryTokenStore
from auth_session.domain.errors import HttpError, NetworkError


class TestSessionFlow:
    """Test the full lifecycle against the in-memory backend."""

    def setup_method(self):
        """Set up test fixtures."""
        self.store = MemoryTokenStore()
        self.repo = MemoryAuthRepository(self.store, latency=0.001)
        self.context = SessionContext(self.repo, self.store)

    def restart(self):
        """Simulate an application restart with persistence intact."""
        return SessionContext(self.repo, self.store)

    def test_register_sign_in_restore_sign_out(self):
        """Test register -> sign in -> restart -> restore -> sign out."""

        async def scenario():
            await self.context.initialize()
            await self.context.register_user(
                UserData("alice", "s3cret", display_name="Alice", email="alice@example.com")
            )
            assert self.context.status == AuthStatus.UNAUTHENTICATED

            user = await self.context.sign_in(Credentials("alice@example.com", "s3cret"))

            restarted = self.restart()
            restored = await restarted.initialize()

            await restarted.sign_out()
            after_sign_out = await self.restart().initialize()
            return user, restored, restarted, after_sign_out

        user, restored, restarted, after_sign_out = asyncio.run(scenario())

        assert user.display_name == "Alice"
        assert restored.status == AuthStatus.AUTHENTICATED
        assert restored.user.user_id == user.user_id
        assert restarted.status == AuthStatus.UNAUTHENTICATED
        assert after_sign_out.status == AuthStatus.UNAUTHENTICATED

    def test_sign_in_rejected(self):
        """Test bad credentials surface HttpError and keep the user signed out."""
        self.repo.add_user("a@x.com", "good")

        async def scenario():
            await self.context.initialize()
            await self.context.sign_in(Credentials("a@x.com", "bad"))

        with pytest.raises(HttpError) as exc_info:
            asyncio.run(scenario())

        assert exc_info.value.status == 401
        assert self.context.status == AuthStatus.UNAUTHENTICATED
        assert self.context.is_loading is False

    def test_sign_out_while_offline(self):
        """Test sign-out succeeds locally when the backend is unreachable."""
        self.repo.add_user("a@x.com", "good")

        async def scenario():
            await self.context.initialize()
            await self.context.sign_in(Credentials("a@x.com", "good"))
            self.repo.offline = True
            await self.context.sign_out()
            return await self.store.load()

        stored = asyncio.run(scenario())

        assert self.context.user is None
        assert self.context.is_loading is False
        assert stored is None

    def test_restore_while_offline(self):
        """Test startup with the backend down ends signed out, silently."""
        self.repo.add_user("a@x.com", "good")

        async def scenario():
            await self.context.initialize()
            await self.context.sign_in(Credentials("a@x.com", "good"))
            self.repo.offline = True
            return await self.restart().initialize()

        state = asyncio.run(scenario())

        assert state.status == AuthStatus.UNAUTHENTICATED
        assert state.is_loading is False

    def test_password_reset_then_sign_in(self):
        """Test forgot password -> verify code -> reset -> sign in."""
        self.repo.add_user("alice", "old", email="alice@example.com")

        async def scenario():
            await self.context.initialize()
            sent = await self.context.send_reset_password_email("alice@example.com")
            code = self.repo.issued_reset_codes["alice@example.com"]
            reset_token = await self.context.verify_reset_code("alice@example.com", code)
            await self.context.reset_password("alice@example.com", "new", reset_token)
            assert self.context.status == AuthStatus.UNAUTHENTICATED
            return sent, await self.context.sign_in(Credentials("alice", "new"))

        sent, user = asyncio.run(scenario())

        assert sent is True
        assert user.identifier == "alice"
        assert self.context.is_authenticated

    def test_concurrent_sign_in_and_sign_out(self):
        """Test interleaved operations keep the invariant and sign-out wins."""
        self.repo.add_user("a@x.com", "good")
        states = []
        self.context.subscribe(states.append)

        async def scenario():
            await self.context.initialize()
            await self.context.sign_in(Credentials("a@x.com", "good"))
            pending = asyncio.create_task(self.context.sign_in(Credentials("a@x.com", "good")))
            await asyncio.sleep(0)
            await self.context.sign_out()
            return await pending

        result = asyncio.run(scenario())

        assert result is None
        assert self.context.user is None
        assert self.context.is_loading is False
        for state in states:
            assert state.is_authenticated == (state.user is not None)

    def test_sign_out_during_restoration_survives_restart(self):
        """Test a sign-out during startup restoration is not undone by the next restart."""
        self.repo.add_user("a@x.com", "good")

        async def scenario():
            await self.context.initialize()
            await self.context.sign_in(Credentials("a@x.com", "good"))
            token = await self.store.load()

            restarted = self.restart()
            restoring = asyncio.create_task(restarted.initialize())
            await asyncio.sleep(0)
            await restarted.sign_out()
            await restoring

            after = await self.restart().initialize()
            return token, restarted, after, await self.store.load()

        token, restarted, after, stored = asyncio.run(scenario())

        assert restarted.user is None
        assert after.status == AuthStatus.UNAUTHENTICATED
        assert stored is None
        with pytest.raises(HttpError) as exc_info:
            asyncio.run(self.repo.fetch_user(token))
        assert exc_info.value.code == "token_revoked"

    def test_superseded_sign_in_token_is_revoked(self):
        """Test the token issued to a sign-in that a sign-out overtook is invalidated."""
        self.repo.add_user("a@x.com", "good")
        issued = []
        login = self.repo.login

        async def recording_login(credentials):
            token = await login(credentials)
            issued.append(token)
            return token

        self.repo.login = recording_login

        async def scenario():
            await self.context.initialize()
            pending = asyncio.create_task(self.context.sign_in(Credentials("a@x.com", "good")))
            await asyncio.sleep(0)
            await self.context.sign_out()
            return await pending

        result = asyncio.run(scenario())

        assert result is None
        assert len(issued) == 1
        with pytest.raises(HttpError) as exc_info:
            asyncio.run(self.repo.fetch_user(issued[0]))
        assert exc_info.value.code == "token_revoked"


def test_sign_in_over_http_timeout():
    """Test a timing-out backend surfaces NetworkError from sign_in."""

    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    store = MemoryTokenStore()
    client = httpx.AsyncClient(base_url="https://id.test", transport=httpx.MockTransport(handler))
    context = SessionContext(HTTPAuthRepository(store, http_client=client), store)

    async def scenario():
        await context.initialize()
        await context.sign_in(Credentials("a@x.com", "good"))

    with pytest.raises(NetworkError):
        asyncio.run(scenario())

    assert context.status == AuthStatus.UNAUTHENTICATED
