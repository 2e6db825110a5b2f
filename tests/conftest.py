from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import httpx

from team_pulse.providers.base.client import BaseHttpClient

FIXED_NOW = datetime(2025, 6, 1, 15, 0, tzinfo=UTC)

Handler = Callable[[httpx.Request], httpx.Response]


def fixed_now() -> datetime:
    return FIXED_NOW


def make_http(handler: Handler, base_url: str = "https://upstream.test") -> BaseHttpClient:
    return BaseHttpClient(base_url=base_url, transport=httpx.MockTransport(handler))


def json_handler(routes: dict[str, Any], calls: list[httpx.Request] | None = None) -> Handler:
    """Serve JSON bodies by URL path; unknown paths are 404s. An int body is a status code."""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        body = routes.get(request.url.path)
        if body is None:
            return httpx.Response(404, json={"message": "not found"})
        if isinstance(body, int):
            return httpx.Response(body, json={"message": "error"})
        return httpx.Response(200, json=body)

    return handler


def failing_handler(status_code: int = 503) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"message": "unavailable"})

    return handler


def exploding_handler(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)
