"""
Unit tests for the auth use cases.
"""

import asyncio

import pytest
from auth_session import use_cases
from auth_session.adapters import MemoryTokenStore
from auth_session.domain.credentials import Credentials, UserData
from auth_session.domain.errors import HttpError, NetworkError
from tests.helpers.fakes import StubRepository


@pytest.fixture
def store():
    return MemoryTokenStore()


@pytest.fixture
def repo(store):
    return StubRepository(store)


def test_login_user_returns_token(repo):
    """Test login returns the repository's token after one call."""
    token = asyncio.run(use_cases.login_user(repo, Credentials("a@x.com", "good")))

    assert token == "tok-1"
    assert repo.calls == [("login", "a@x.com")]


def test_login_user_propagates_error_unchanged(repo):
    """Test classified errors pass through untouched, without retries."""
    error = HttpError(401, "Invalid credentials")
    repo.login_error = error

    with pytest.raises(HttpError) as exc_info:
        asyncio.run(use_cases.login_user(repo, Credentials("a@x.com", "bad")))

    assert exc_info.value is error
    assert repo.count("login") == 1


def test_login_user_does_not_log_secret(repo, caplog):
    """Test the secret never reaches the logs."""
    caplog.set_level("DEBUG", logger="auth_session")

    asyncio.run(use_cases.login_user(repo, Credentials("a@x.com", "hunter2")))

    assert "hunter2" not in caplog.text
    assert "tok-1" not in caplog.text


def test_register_user(repo):
    """Test registration forwards the payload."""
    asyncio.run(use_cases.register_user(repo, UserData("new@x.com", "pw")))
    assert repo.calls == [("register", "new@x.com")]


def test_register_user_propagates_error(repo):
    """Test duplicate accounts surface as HttpError."""
    repo.register_error = HttpError(409, "Account already exists")

    with pytest.raises(HttpError) as exc_info:
        asyncio.run(use_cases.register_user(repo, UserData("a@x.com", "pw")))
    assert exc_info.value.status == 409


def test_reset_flow_use_cases(repo):
    """Test reset use cases map onto their repository calls."""

    async def scenario():
        sent = await use_cases.send_reset_code(repo, "a@x.com")
        await use_cases.forgot_password(repo, "a@x.com")
        reset_token = await use_cases.verify_reset_code(repo, "a@x.com", "123456")
        await use_cases.reset_password(repo, "a@x.com", "new-pw", reset_token)
        return sent, reset_token

    sent, reset_token = asyncio.run(scenario())

    assert sent is True
    assert reset_token == "reset-1"
    assert repo.calls == [
        ("forgot_password", "a@x.com"),
        ("forgot_password", "a@x.com"),
        ("verify_reset_code", "a@x.com", "123456"),
        ("change_password", "a@x.com", "reset-1"),
    ]


def test_send_reset_code_failure_raises(repo):
    """Test a failed reset request raises instead of returning False."""
    repo.reset_error = NetworkError("offline")

    with pytest.raises(NetworkError):
        asyncio.run(use_cases.send_reset_code(repo, "a@x.com"))


def test_check_auth_status(repo, store):
    """Test restoration returns None without a token and the user with one."""
    assert asyncio.run(use_cases.check_auth_status(repo)) is None

    asyncio.run(store.save("tok-1"))
    user = asyncio.run(use_cases.check_auth_status(repo))
    assert user.user_id == "1"


def test_fetch_current_user_and_sign_out(repo):
    """Test single-call wrappers."""
    user = asyncio.run(use_cases.fetch_current_user(repo, "tok-1"))
    asyncio.run(use_cases.sign_out_user(repo))

    assert user.user_id == "1"
    assert repo.calls == [("fetch_user", "tok-1"), ("sign_out",)]


def test_sign_out_user_with_token(repo):
    """Test an explicit token is passed through for invalidation."""
    asyncio.run(use_cases.sign_out_user(repo, "tok-9"))

    assert repo.calls == [("sign_out", "tok-9")]
