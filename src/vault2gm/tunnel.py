"""Public tunnel contract."""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from urllib.parse import urlparse

from vault2gm.exceptions import BindError


@runtime_checkable
class Tunnel(Protocol):
    """Exposes the local listener under a public HTTPS address."""

    async def start(self) -> str:
        """Open the tunnel and return its public URL."""
        ...

    async def stop(self) -> None: ...

    def is_active(self) -> bool: ...

    def get_public_url(self) -> str | None: ...


class StaticUrlTunnel:
    """A tunnel managed outside this process, known only by its URL."""

    def __init__(self, public_url: str) -> None:
        parsed = urlparse(public_url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise BindError(f"Invalid public URL: {public_url!r}")
        self.public_url = public_url.rstrip("/")
        self._active = False

    async def start(self) -> str:
        self._active = True
        return self.public_url

    async def stop(self) -> None:
        self._active = False

    def is_active(self) -> bool:
        return self._active

    def get_public_url(self) -> str | None:
        return self.public_url if self._active else None
