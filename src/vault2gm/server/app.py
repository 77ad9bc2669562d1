"""Loopback HTTP server hosting the route table."""

from __future__ import annotations

import asyncio
import socket

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vault2gm.config import LOOPBACK_HOSTS, VAULT2GM_HOST, VAULT2GM_PORT
from vault2gm.exceptions import BindError
from vault2gm.server.router import Handler, Route, Router
from vault2gm.utils.logging_config import get_logger

logger = get_logger(__name__)

_HTTP_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"]
_STARTUP_POLL_S = 0.01


class ContentServer:
    """Serve a :class:`Router` on a loopback address.

    ``start``/``stop`` are idempotent; starting while running is a no-op and
    never opens a second listener.
    """

    def __init__(self, port: int = VAULT2GM_PORT, host: str = VAULT2GM_HOST) -> None:
        if host not in LOOPBACK_HOSTS:
            raise BindError(f"Refusing to bind non-loopback host {host!r}")
        self.host = host
        self.port = port
        self.router = Router()
        self.app = self._create_app()
        self._server: uvicorn.Server | None = None
        self._task: asyncio.Task[None] | None = None
        self._socket: socket.socket | None = None
        self._lock = asyncio.Lock()

    def _create_app(self) -> FastAPI:
        app = FastAPI(title="vault2gm", docs_url=None, redoc_url=None, openapi_url=None)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )
        app.add_route("/{path:path}", self.router.dispatch, methods=_HTTP_METHODS, include_in_schema=False)
        return app

    @property
    def local_url(self) -> str:
        return f"http://localhost:{self.port}"

    def register_route(self, method: str, pattern: str, handler: Handler) -> Route:
        return self.router.register_route(method, pattern, handler)

    def is_running(self) -> bool:
        return self._server is not None

    async def start(self) -> None:
        """Bind the port and serve in a background task.

        Raises:
            BindError: If the port cannot be bound. State is left unchanged.
        """
        async with self._lock:
            if self.is_running():
                logger.info("Content server already running", extra={"port": self.port})
                return

            sock = self._bind_socket()
            config = uvicorn.Config(self.app, lifespan="off", log_config=None, access_log=False)
            server = uvicorn.Server(config)
            task = asyncio.create_task(server.serve(sockets=[sock]))

            while not server.started:
                if task.done():
                    sock.close()
                    exc = task.exception()
                    raise BindError(f"Content server failed to start: {exc}")
                await asyncio.sleep(_STARTUP_POLL_S)

            self._server = server
            self._task = task
            self._socket = sock
            logger.info("Content server started", extra={"host": self.host, "port": self.port})

    async def stop(self) -> None:
        async with self._lock:
            if self._server is None:
                return
            self._server.should_exit = True
            if self._task is not None:
                await self._task
            if self._socket is not None:
                self._socket.close()
            self._server = None
            self._task = None
            self._socket = None
            logger.info("Content server stopped", extra={"port": self.port})

    def _bind_socket(self) -> socket.socket:
        family = socket.AF_INET6 if ":" in self.host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, self.port))
        except OSError as exc:
            sock.close()
            raise BindError(f"Cannot bind {self.host}:{self.port}: {exc}") from exc
        # Port 0 asks the OS for a free port.
        self.port = sock.getsockname()[1]
        return sock
