"""
Logging setup for applications embedding auth-session.

Library modules only call logging.getLogger(__name__); configuring
handlers is left to the application, which can use setup_logging().
"""

import logging
import os
from typing import Optional, Union

log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: Optional[Union[str, int]] = None) -> None:
    """
    Configure root logging.

    Args:
        level: Log level name or number. Defaults to $LOG_LEVEL, then INFO.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    log.debug("Logging configured (level=%s)", logging.getLevelName(level))


def redact(token: Optional[str], keep: int = 6) -> str:
    """Render a token for logs: short prefix only."""
    if not token:
        return "<none>"
    if len(token) <= keep:
        return "***"
    return f"{token[:keep]}..."
