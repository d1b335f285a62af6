"""
Unit tests for domain models and the error taxonomy.
"""

import dataclasses

import pytest
from auth_session.domain.credentials import Credentials, UserData
from auth_session.domain.errors import AuthError, HttpError, NetworkError
from auth_session.domain.session import AuthStatus, SessionState
from auth_session.domain.user import User


def test_credentials_hide_secret():
    """Test secret never shows in repr."""
    creds = Credentials(identifier="alice@example.com", secret="hunter2")

    assert "alice@example.com" in repr(creds)
    assert "hunter2" not in repr(creds)


def test_credentials_immutable():
    """Test credentials cannot be modified."""
    creds = Credentials(identifier="alice", secret="pw")

    with pytest.raises(dataclasses.FrozenInstanceError):
        creds.secret = "other"


def test_user_data_payload():
    """Test registration payload keeps only provided fields."""
    data = UserData(identifier="alice", secret="pw", email="alice@example.com")

    payload = data.to_payload()
    assert payload == {
        "identifier": "alice",
        "password": "pw",
        "email": "alice@example.com",
    }

    full = UserData(
        identifier="bob",
        secret="pw",
        display_name="Bob",
        profile={"city": "Lima"},
    ).to_payload()
    assert full["displayName"] == "Bob"
    assert full["profile"] == {"city": "Lima"}


def test_user_from_backend_payload():
    """Test users decode from backend payloads keyed by "id"."""
    user = User.from_dict({"id": 1, "email": "a@x.com", "displayName": "Ann"})

    assert user.user_id == "1"
    assert user.identifier == "a@x.com"
    assert user.display_name == "Ann"
    assert user.label == "Ann"


def test_user_serialization():
    """Test user to_dict and from_dict."""
    user = User(
        user_id="usr_1",
        identifier="alice",
        email="alice@example.com",
        metadata={"plan": "pro"},
    )

    data = user.to_dict()
    assert data["user_id"] == "usr_1"
    assert data["metadata"] == {"plan": "pro"}

    restored = User.from_dict(data)
    assert restored == user
    assert restored.label == "alice"


def test_user_from_dict_requires_id():
    """Test a payload without any id is rejected."""
    with pytest.raises(KeyError):
        User.from_dict({"email": "a@x.com"})


def test_initial_session_state():
    """Test startup state is UNKNOWN and loading."""
    state = SessionState.initial()

    assert state.status == AuthStatus.UNKNOWN
    assert state.is_loading is True
    assert state.is_authenticated is False
    assert state.user is None


def test_session_state_authenticated_follows_user():
    """Test is_authenticated is derived from user."""
    user = User(user_id="1", identifier="a@x.com")

    signed_in = SessionState(user=user, is_loading=False, initialized=True)
    signed_out = SessionState(user=None, is_loading=False, initialized=True)

    assert signed_in.is_authenticated is True
    assert signed_in.status == AuthStatus.AUTHENTICATED
    assert signed_out.is_authenticated is False
    assert signed_out.status == AuthStatus.UNAUTHENTICATED

    data = signed_in.to_dict()
    assert data["is_authenticated"] is True
    assert data["status"] == "authenticated"
    assert data["user"]["user_id"] == "1"


def test_http_error():
    """Test HttpError carries status, code and message."""
    error = HttpError(401, "Invalid credentials", "invalid_credentials")

    assert isinstance(error, AuthError)
    assert error.status == 401
    assert error.is_unauthorized
    assert error.message == "Invalid credentials"
    assert str(error) == "HTTP 401 (invalid_credentials): Invalid credentials"
    assert str(HttpError(409, "Exists")) == "HTTP 409: Exists"
    assert not HttpError(409, "Exists").is_unauthorized


def test_network_error():
    """Test NetworkError is an AuthError but not an HttpError."""
    error = NetworkError("timed out")

    assert isinstance(error, AuthError)
    assert not isinstance(error, HttpError)
    assert error.message == "timed out"
