"""Logging setup shared by the library, the server and the CLI."""

from __future__ import annotations

import logging
import sys

from vault2gm.config import VAULT2GM_LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_ROOT_LOGGER_NAME = "vault2gm"


def configure_logging(level: str | int = VAULT2GM_LOG_LEVEL) -> None:
    """Install a single stream handler on the package and uvicorn loggers.

    Calling this more than once only updates the level.
    """
    formatter = logging.Formatter(LOG_FORMAT)
    for name in (_ROOT_LOGGER_NAME, "uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(name)
        logger.setLevel(level)
        if not any(getattr(h, "_vault2gm", False) for h in logger.handlers):
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(formatter)
            handler._vault2gm = True  # type: ignore[attr-defined]
            logger.addHandler(handler)
        logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return a module logger below the ``vault2gm`` namespace."""
    if name == _ROOT_LOGGER_NAME or name.startswith(f"{_ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")
