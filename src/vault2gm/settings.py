"""Persisted key-value settings."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from vault2gm.config import VAULT2GM_PORT, VAULT2GM_SETTINGS_PATH
from vault2gm.exceptions import SettingsError
from vault2gm.parsers.base import ParseMode


class Settings(BaseModel):
    """Values restored when the application starts again.

    Attributes:
        port: Local port of the content server.
        session_file_path: Vault-relative path of the selected entry document.
        server_enabled: Whether the server was running when last saved.
        public_url: Last known public tunnel URL.
        parse_mode: Tree extraction strategy.
    """

    port: int = Field(default=VAULT2GM_PORT, ge=0, le=65535)
    session_file_path: str | None = None
    server_enabled: bool = False
    public_url: str | None = None
    parse_mode: ParseMode = ParseMode.FOLDER


class SettingsStore:
    """JSON file backed :class:`Settings` storage."""

    def __init__(self, path: Path | str = VAULT2GM_SETTINGS_PATH) -> None:
        self.path = Path(path).expanduser()

    def load(self) -> Settings:
        """Load settings; a missing file yields defaults.

        Raises:
            SettingsError: If the file exists but cannot be read or validated.
        """
        if not self.path.exists():
            return Settings()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return Settings.model_validate(data)
        except (OSError, ValueError, ValidationError) as exc:
            raise SettingsError(f"Invalid settings file {self.path}: {exc}") from exc

    def save(self, settings: Settings) -> None:
        """Write settings atomically (temp file + replace)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(settings.model_dump(mode="json"), indent=2)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".settings-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
