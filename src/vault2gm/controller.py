"""Wire the vault, parsers, renderers and server together.

The controller owns the process-wide state: the selected entry document and
the public URL. Route handlers only read it.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable

from fastapi import Request
from fastapi.responses import Response

from vault2gm.config import VAULT2GM_HOST, VAULT2GM_PORT
from vault2gm.exceptions import (
    BindError,
    NotSelectedError,
    PageNotFoundError,
    ReadFailureError,
    SettingsError,
)
from vault2gm.exporter import GMVaultJSONBuilder
from vault2gm.markdown import MarkdownRenderer
from vault2gm.parsers import ParseMode, create_parser
from vault2gm.server import ContentServer, send_html, send_json
from vault2gm.settings import Settings, SettingsStore
from vault2gm.slugify import slugify
from vault2gm.tunnel import Tunnel
from vault2gm.utils.logging_config import get_logger
from vault2gm.vault import Vault, VaultEntry

logger = get_logger(__name__)

Notifier = Callable[[str], None]


def _log_notifier(message: str) -> None:
    logger.info(message)


class VaultController:
    """Orchestrates export and serving for one vault."""

    def __init__(
        self,
        vault: Vault,
        *,
        port: int = VAULT2GM_PORT,
        mode: ParseMode | str = ParseMode.FOLDER,
        host: str = VAULT2GM_HOST,
        tunnel: Tunnel | None = None,
        settings_store: SettingsStore | None = None,
        notify: Notifier | None = None,
    ) -> None:
        self.vault = vault
        self.mode = ParseMode(mode)
        self.tunnel = tunnel
        self.settings_store = settings_store
        self.notify = notify or _log_notifier
        self.server = ContentServer(port=port, host=host)
        self.json_builder = GMVaultJSONBuilder(self.server.local_url)
        self.markdown_renderer = MarkdownRenderer()
        self.selected_entry: VaultEntry | None = None
        self.public_url: str | None = None
        self._register_routes()

    @property
    def port(self) -> int:
        return self.server.port

    @port.setter
    def port(self, value: int) -> None:
        if self.server.is_running():
            raise BindError("Cannot change the port while the server is running")
        self.server.port = value
        if self.public_url is None:
            self.json_builder.set_base_url(self.server.local_url)

    def select_entry(self, path: str) -> VaultEntry:
        """Select the entry document used by ``GET /gm-vault``."""
        self.selected_entry = self.vault.markdown_entry(path)
        self.notify(f"Session page selected: {self.selected_entry.basename}")
        if self.settings_store is not None:
            self.settings_store.save(self._current_settings())
        return self.selected_entry

    def set_mode(self, mode: ParseMode | str) -> None:
        self.mode = ParseMode(mode)

    def gm_vault_url(self) -> str | None:
        base = self.public_url or (self.server.local_url if self.server.is_running() else None)
        return f"{base}/gm-vault" if base else None

    async def export_json(self) -> dict[str, Any]:
        """Parse the selected entry and build the GM Vault JSON tree.

        Raises:
            NotSelectedError: If no entry document is selected.
        """
        entry = self.selected_entry
        if entry is None:
            raise NotSelectedError("No session page selected")
        parser = create_parser(self.mode, self.vault)
        session = await parser.parse(entry)
        logger.debug(
            "Session parsed",
            extra={"entry": entry.relpath, "mode": self.mode.value, "pages": sum(1 for _ in session.iter_pages())},
        )
        return self.json_builder.build_json(session)

    def find_file_by_slug(self, slug: str) -> VaultEntry | None:
        """Return the first document whose slugified or lower-cased base name is ``slug``."""
        for entry in self.vault.markdown_files():
            if slugify(entry.basename) == slug or entry.basename.lower() == slug:
                return entry
        return None

    async def render_slug(self, slug: str) -> str:
        """Render the document behind ``slug`` as a full HTML page.

        Raises:
            PageNotFoundError: If no document matches.
            ReadFailureError: If the document cannot be read.
        """
        entry = await asyncio.to_thread(self.find_file_by_slug, slug)
        if entry is None:
            raise PageNotFoundError(f"Page not found: {slug}")
        text = await self.vault.read_text(entry)
        return self.markdown_renderer.render_page(text, entry.basename, self.json_builder.base_url)

    async def enable_server(self) -> bool:
        """Start the server and, when configured, the tunnel.

        Returns True when the server is running afterwards.
        """
        if self.selected_entry is None:
            self.notify('Select a session page first ("select" command or --entry)')
            return False

        was_running = self.server.is_running()
        try:
            await self.server.start()
        except (BindError, OSError) as exc:
            self.notify(f"Could not start the server: {exc}")
            return False

        if self.tunnel is None:
            self.json_builder.set_base_url(self.server.local_url)
        else:
            self.notify("Opening public tunnel...")
            try:
                public_url = (await self.tunnel.start()).rstrip("/")
            except Exception as exc:
                # Tunnel providers raise their own error types.
                logger.warning("Tunnel setup failed", extra={"error": repr(exc)})
                self.notify(f"Could not open the public tunnel: {exc}")
                if not was_running:
                    await self.server.stop()
                return False
            self.public_url = public_url
            self.json_builder.set_base_url(public_url)

        self.notify(f"GM Vault access enabled: {self.gm_vault_url()}")
        await self.save_settings()
        return True

    async def disable_server(self) -> None:
        if self.tunnel is not None and self.tunnel.is_active():
            await self.tunnel.stop()
        await self.server.stop()
        self.public_url = None
        self.json_builder.set_base_url(self.server.local_url)
        self.notify("GM Vault access disabled")
        await self.save_settings()

    async def load_settings(self, *, restart: bool = True) -> Settings | None:
        """Restore persisted state.

        With ``restart`` the server is started again when it was enabled on save.
        """
        if self.settings_store is None:
            return None
        try:
            settings = await asyncio.to_thread(self.settings_store.load)
        except SettingsError as exc:
            logger.warning("Ignoring unreadable settings", extra={"error": str(exc)})
            return None

        self.port = settings.port
        self.mode = settings.parse_mode
        if settings.session_file_path:
            try:
                self.selected_entry = self.vault.markdown_entry(settings.session_file_path)
            except ReadFailureError as exc:
                logger.warning(
                    "Saved session page is no longer available",
                    extra={"path": settings.session_file_path, "error": str(exc)},
                )
        if restart and settings.server_enabled:
            await self.enable_server()
        return settings

    async def save_settings(self) -> None:
        if self.settings_store is None:
            return
        await asyncio.to_thread(self.settings_store.save, self._current_settings())

    def _current_settings(self) -> Settings:
        return Settings(
            port=self.port,
            session_file_path=self.selected_entry.relpath if self.selected_entry else None,
            server_enabled=self.server.is_running(),
            public_url=(self.tunnel.get_public_url() if self.tunnel else None) or self.public_url,
            parse_mode=self.mode,
        )

    async def cleanup(self) -> None:
        if self.tunnel is not None and self.tunnel.is_active():
            await self.tunnel.stop()
        if self.server.is_running():
            await self.server.stop()

    def _register_routes(self) -> None:
        self.server.register_route("GET", "/gm-vault", self._handle_gm_vault)
        self.server.register_route("GET", "/pages/:slug", self._handle_page)

    async def _handle_gm_vault(self, request: Request, params: dict[str, str]) -> Response:
        return send_json(await self.export_json())

    async def _handle_page(self, request: Request, params: dict[str, str]) -> Response:
        return send_html(await self.render_slug(params["slug"]))
