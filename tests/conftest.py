"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest

from clickup_cli.api.client import ClickUpClient
from clickup_cli.cache.store import ReadThroughCache
from clickup_cli.http.transport import ApiTransport

API_PREFIX = "/api/v2"
TEAM_ID = "T1"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeClickUp:
    """In-memory stand-in for the ClickUp API recording every request."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Handler] = {}

    def add(
        self,
        method: str,
        path: str,
        payload: Any = None,
        *,
        status: int = 200,
        handler: Handler | None = None,
    ) -> None:
        if handler is None:

            def _respond(_request: httpx.Request) -> httpx.Response:
                if isinstance(payload, str):
                    return httpx.Response(status, text=payload)
                return httpx.Response(status, json=payload if payload is not None else {})

            handler = _respond

        self._routes[(method, path)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix(API_PREFIX)
        route = self._routes.get((request.method, path))
        if route is None:
            return httpx.Response(404, text='{"err":"Route not found","ECODE":"APP_001"}')
        return route(request)

    def calls(self, method: str | None = None, path: str | None = None) -> list[httpx.Request]:
        return [
            request
            for request in self.requests
            if (method is None or request.method == method)
            and (path is None or request.url.path.removeprefix(API_PREFIX) == path)
        ]

    @staticmethod
    def body(request: httpx.Request) -> dict[str, Any]:
        return json.loads(request.content.decode("utf-8"))


@pytest.fixture()
def fake_api() -> FakeClickUp:
    return FakeClickUp()


@pytest.fixture()
def transport(fake_api: FakeClickUp) -> Iterator[ApiTransport]:
    api_transport = ApiTransport(api_key="pk_test", transport=httpx.MockTransport(fake_api.handle))
    yield api_transport
    api_transport.close()


@pytest.fixture()
def cache(tmp_path: Path) -> Iterator[ReadThroughCache]:
    read_through = ReadThroughCache(tmp_path / "cache", namespace="test")
    yield read_through
    read_through.close()


@pytest.fixture()
def client(transport: ApiTransport, cache: ReadThroughCache) -> ClickUpClient:
    return ClickUpClient(transport, cache, team_id=TEAM_ID)
