"""
Unit tests for logging helpers.
"""

import logging

from auth_session.logging_setup import redact, setup_logging


def test_redact():
    """Test tokens are reduced to a short prefix."""
    assert redact("eyJhbGciOiJIUzI1NiJ9.payload.sig") == "eyJhbG..."
    assert redact("short") == "***"
    assert redact(None) == "<none>"
    assert redact("") == "<none>"


def test_setup_logging_quiets_httpx(monkeypatch):
    """Test setup honours LOG_LEVEL and quiets the HTTP client loggers."""
    monkeypatch.setenv("LOG_LEVEL", "debug")

    setup_logging()

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING
