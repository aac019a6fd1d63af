"""
Logging setup for shelfcart.

    from shelfcart.logging import get_logger, loggable
    logger = get_logger(__name__)
    logger.info("Cart saved for user %s", loggable(user_id))

User and book ids arrive in URL paths, so they go through `loggable`
before reaching a log line.
"""

import logging
import os
import sys
from functools import cache

# Control characters (newlines included) would let a caller forge log lines
_CONTROL_CHARS = {code: None for code in range(32)}
_CONTROL_CHARS.update({ord("\n"): "\\n", ord("\r"): "\\r", ord("\t"): "\\t", 127: None})


def configure_logging(level: str | None = None) -> None:
    """Attach a stdout handler to the root logger unless one is already present."""
    root = logging.getLogger()
    if root.handlers:
        return

    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    if os.environ.get("ENVIRONMENT", "").lower() == "production":
        fmt = "%(levelname)s %(name)s: %(message)s"
    else:
        fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)

    # One line per stock/order request is noise at INFO
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def loggable(value, limit: int = 16) -> str:
    """Escape control characters in an id or service message and cap its length."""
    if value is None or value == "":
        return "N/A"
    text = str(value).translate(_CONTROL_CHARS)
    return text if len(text) <= limit else text[:limit] + "..."
