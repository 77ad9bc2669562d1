"""HTTP surface of vault2gm."""

from vault2gm.server.app import ContentServer
from vault2gm.server.router import Route, Router, send_html, send_json

__all__ = ["ContentServer", "Route", "Router", "send_html", "send_json"]
