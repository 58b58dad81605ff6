from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from openai_pack.common.config import ExecutionContext, Settings

BASE_URL = "https://api.test/v1"


class FakeApi:
    """Scripted stand-in for the remote API; records every request it receives."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def reply(self, path: str, json_body: Any, status_code: int = 200) -> None:
        self._routes[path] = lambda request: httpx.Response(status_code, json=json_body)

    def fail(self, path: str, exc: type[httpx.TransportError] = httpx.ConnectError) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc("connection refused", request=request)

        self._routes[path] = _raise

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/v1")
        handler = self._routes.get(path)
        if handler is None:
            return httpx.Response(404, json={"error": {"message": f"no route for {path}"}})
        return handler(request)

    @property
    def paths(self) -> list[str]:
        return [r.url.path.removeprefix("/v1") for r in self.requests]

    @property
    def bodies(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]

    def client(self) -> httpx.Client:
        return httpx.Client(
            base_url=BASE_URL,
            headers={"Authorization": "Bearer test-key"},
            transport=httpx.MockTransport(self._handle),
        )

    def context(self, **settings: Any) -> ExecutionContext:
        return ExecutionContext(
            client=self.client(),
            settings=Settings(api_key="test-key", base_url=BASE_URL, **settings),
        )


@pytest.fixture
def api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def context(api: FakeApi) -> ExecutionContext:
    return api.context()
