"""Tests for the method + path router."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from vault2gm.exceptions import NotSelectedError, ReadFailureError
from vault2gm.server.router import Route, Router, send_html, send_json


def _request(method: str, path: str) -> MagicMock:
    request = MagicMock()
    request.method = method
    request.url.path = path
    return request


async def _ok(request, params):
    return send_json({"params": params})


class TestRouteMatching:
    """Tests for Route.match and Router.match."""

    def test_matches_named_segments(self) -> None:
        route = Route(method="GET", pattern="/pages/:slug", handler=_ok)
        assert route.match("GET", "/pages/foo-bar") == {"slug": "foo-bar"}

    def test_named_segment_matches_single_component(self) -> None:
        route = Route(method="GET", pattern="/pages/:slug", handler=_ok)
        assert route.match("GET", "/pages/a/b") is None
        assert route.match("GET", "/pages") is None

    def test_method_must_match(self) -> None:
        route = Route(method="GET", pattern="/gm-vault", handler=_ok)
        assert route.match("POST", "/gm-vault") is None
        assert route.match("get", "/gm-vault") == {}

    def test_literal_segments_must_match(self) -> None:
        route = Route(method="GET", pattern="/a/:x/c", handler=_ok)
        assert route.match("GET", "/a/1/c") == {"x": "1"}
        assert route.match("GET", "/a/1/d") is None

    @pytest.mark.parametrize("path", ["/gm-vault/", "//gm-vault", "/gm-vault//"])
    def test_empty_components_are_significant(self, path: str) -> None:
        route = Route(method="GET", pattern="/gm-vault", handler=_ok)
        assert route.match("GET", path) is None

    @pytest.mark.parametrize("path", ["/pages/", "//pages/x", "/pages//x"])
    def test_named_segment_never_captures_empty_component(self, path: str) -> None:
        route = Route(method="GET", pattern="/pages/:slug", handler=_ok)
        assert route.match("GET", path) is None

    def test_root_pattern(self) -> None:
        route = Route(method="GET", pattern="/", handler=_ok)
        assert route.match("GET", "/") == {}
        assert route.match("GET", "/x") is None

    def test_first_registered_route_wins(self) -> None:
        router = Router()
        first = router.register_route("GET", "/pages/special", _ok)
        router.register_route("get", "/pages/:slug", _ok)

        route, params = router.match("GET", "/pages/special")
        assert route is first
        assert params == {}

        route, params = router.match("GET", "/pages/other")
        assert route.method == "GET"
        assert params == {"slug": "other"}

    def test_no_match(self) -> None:
        assert Router().match("GET", "/") is None


class TestDispatch:
    """Tests for Router.dispatch."""

    @pytest.mark.asyncio
    async def test_passes_params_to_handler(self) -> None:
        router = Router()
        router.register_route("GET", "/pages/:slug", _ok)

        response = await router.dispatch(_request("GET", "/pages/orc"))

        assert response.status_code == 200
        assert json.loads(response.body) == {"params": {"slug": "orc"}}

    @pytest.mark.asyncio
    async def test_unmatched_request_is_404(self) -> None:
        response = await Router().dispatch(_request("GET", "/nope"))
        assert response.status_code == 404
        assert "error" in json.loads(response.body)

    @pytest.mark.asyncio
    async def test_domain_errors_use_their_status(self) -> None:
        async def handler(request, params):
            raise NotSelectedError("No session page selected")

        router = Router()
        router.register_route("GET", "/gm-vault", handler)
        response = await router.dispatch(_request("GET", "/gm-vault"))

        assert response.status_code == 400
        assert json.loads(response.body) == {"error": "No session page selected"}

    @pytest.mark.asyncio
    async def test_read_failures_are_500(self) -> None:
        async def handler(request, params):
            raise ReadFailureError("cannot read")

        router = Router()
        router.register_route("GET", "/x", handler)
        response = await router.dispatch(_request("GET", "/x"))

        assert response.status_code == 500

    @pytest.mark.asyncio
    async def test_unexpected_errors_never_escape(self) -> None:
        async def handler(request, params):
            raise RuntimeError("boom")

        router = Router()
        router.register_route("GET", "/x", handler)
        response = await router.dispatch(_request("GET", "/x"))

        assert response.status_code == 500
        assert json.loads(response.body) == {"error": "boom"}


class TestSendHelpers:
    """Tests for send_json and send_html."""

    def test_send_json(self) -> None:
        response = send_json({"a": 1}, 201)
        assert response.status_code == 201
        assert response.media_type == "application/json"
        assert json.loads(response.body) == {"a": 1}

    def test_send_html(self) -> None:
        response = send_html("<p>x</p>")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert response.body == b"<p>x</p>"
