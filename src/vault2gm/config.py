"""Local configuration for vault2gm."""

from __future__ import annotations

import os
from pathlib import Path


DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000
DEFAULT_SETTINGS_PATH = "~/.vault2gm/settings.json"
DEFAULT_LOG_LEVEL = "INFO"

MARKDOWN_EXTENSIONS = frozenset({"md"})
LOOPBACK_HOSTS = frozenset({"127.0.0.1", "localhost", "::1"})

# Loopback only; the public address comes from a tunnel.
VAULT2GM_HOST = os.getenv("VAULT2GM_HOST", DEFAULT_HOST)
VAULT2GM_PORT = int(os.getenv("VAULT2GM_PORT", str(DEFAULT_PORT)))
VAULT2GM_PUBLIC_URL = os.getenv("VAULT2GM_PUBLIC_URL") or None
VAULT2GM_SETTINGS_PATH = Path(os.getenv("VAULT2GM_SETTINGS_PATH", DEFAULT_SETTINGS_PATH)).expanduser()
VAULT2GM_LOG_LEVEL = os.getenv("VAULT2GM_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
