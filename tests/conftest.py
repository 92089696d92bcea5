"""Pytest configuration and test helpers."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest


# Ensure the package is importable when running tests without an editable
# install. This mirrors the expected runtime layout where ``plexgraph`` sits at
# the project root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from plexgraph.config import Settings  # noqa: E402

BASE_URL = "http://plex.test:32400"


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


@pytest.fixture
def settings() -> Settings:
    """Return a settings object with defaults suitable for tests."""

    return Settings(
        _env_file=None,
        PLEX_BASEURL=BASE_URL,
        PLEX_TOKEN="secret-token",
        PLEX_CLIENT_IDENTIFIER="test-client",
        PLEX_DEVICE_NAME="pytest",
        PLEX_PLATFORM="Linux",
        PLEX_PLATFORM_VERSION="6.0",
    )  # type: ignore[call-arg]


class Router:
    """``httpx.MockTransport`` handler serving canned payloads by URL path."""

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes: dict[str, Any] = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        payload = self.routes.get(request.url.path)
        if payload is None:
            return httpx.Response(404, json={"error": "not found"})
        if callable(payload):
            payload = payload(request)
        if isinstance(payload, httpx.Response):
            return payload
        return httpx.Response(200, json=payload)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self), base_url=BASE_URL)


@pytest.fixture
def router() -> Router:
    return Router()


class FakeServer:
    """Minimal stand-in exposing only the async ``query`` capability."""

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = dict(responses or {})
        self.calls: list[tuple[str, str]] = []

    async def query(self, path: str, method: str = "get", headers: Any = None) -> Any:
        self.calls.append((path, method))
        base = path.split("?", 1)[0]
        if path in self.responses:
            return self.responses[path]
        return self.responses.get(base, {})


@pytest.fixture
def fake_server() -> Callable[..., FakeServer]:
    return FakeServer
