"""Method + path router with ``:param`` segments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from fastapi import Request, status
from fastapi.responses import HTMLResponse, JSONResponse, Response

from vault2gm.exceptions import Vault2gmError
from vault2gm.utils.logging_config import get_logger

logger = get_logger(__name__)

Handler = Callable[[Request, dict[str, str]], Awaitable[Response]]


def send_json(body: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """Serialize ``body`` as an ``application/json`` response."""
    return JSONResponse(content=body, status_code=status_code)


def send_html(body: str, status_code: int = status.HTTP_200_OK) -> HTMLResponse:
    """Return ``body`` as a ``text/html`` response."""
    return HTMLResponse(content=body, status_code=status_code)


def _split_path(path: str) -> tuple[str, ...]:
    # Empty components are kept: "/a/" and "//a" never match "/a".
    return tuple(path.removeprefix("/").split("/"))


@dataclass(frozen=True)
class Route:
    """A registered route; ``:name`` segments capture one path component."""

    method: str
    pattern: str
    handler: Handler

    @property
    def segments(self) -> tuple[str, ...]:
        return _split_path(self.pattern)

    def match(self, method: str, path: str) -> dict[str, str] | None:
        if method.upper() != self.method:
            return None
        parts = _split_path(path)
        segments = self.segments
        if len(parts) != len(segments):
            return None

        params: dict[str, str] = {}
        for segment, part in zip(segments, parts):
            if segment.startswith(":"):
                if not part:
                    return None
                params[segment[1:]] = part
            elif segment != part:
                return None
        return params


class Router:
    """Ordered route table; the first matching route wins."""

    def __init__(self) -> None:
        self.routes: list[Route] = []

    def register_route(self, method: str, pattern: str, handler: Handler) -> Route:
        route = Route(method=method.upper(), pattern=pattern, handler=handler)
        self.routes.append(route)
        return route

    def match(self, method: str, path: str) -> tuple[Route, dict[str, str]] | None:
        for route in self.routes:
            params = route.match(method, path)
            if params is not None:
                return route, params
        return None

    async def dispatch(self, request: Request) -> Response:
        """Run the handler for ``request``; errors become JSON error bodies."""
        method = request.method
        path = request.url.path
        matched = self.match(method, path)
        if matched is None:
            return send_json({"error": f"Not found: {method} {path}"}, status.HTTP_404_NOT_FOUND)

        route, params = matched
        try:
            return await route.handler(request, params)
        except Vault2gmError as exc:
            if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
                logger.error(
                    "Request failed",
                    extra={"method": method, "path": path, "error": str(exc)},
                )
            else:
                logger.info(
                    "Request rejected",
                    extra={"method": method, "path": path, "status": exc.status_code, "error": str(exc)},
                )
            return send_json({"error": str(exc)}, exc.status_code)
        except Exception as exc:
            logger.exception("Unhandled error in route handler", extra={"method": method, "path": path})
            return send_json({"error": f"{exc!s}"}, status.HTTP_500_INTERNAL_SERVER_ERROR)
