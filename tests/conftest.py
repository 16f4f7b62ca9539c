"""
Shared fixtures.

The upstream APIs are replaced by an ``httpx.MockTransport`` client injected
through FastAPI's dependency overrides, and secrets are injected the same way,
so no test touches the network or the real environment.
"""

from __future__ import annotations

from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from omni_relay.core.config import Settings, get_settings
from omni_relay.core.http_client import get_http_client
from omni_relay.main import app


class FakeUpstream:
    """Records outbound requests and answers them with ``responder``."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(200, json={})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    def reply(self, status_code: int = 200, **kwargs) -> None:
        self.responder = lambda request: httpx.Response(status_code, **kwargs)

    def fail(self, exc_type=httpx.ConnectError) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc_type("upstream unreachable", request=request)

        self.responder = _raise


@pytest.fixture
def settings() -> Settings:
    return Settings(gemini_api_key="AIza-test-gemini-key", judge0_api_key="rapid-test-key")


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def client(settings, upstream):
    mock_client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_http_client] = lambda: mock_client
    yield TestClient(app)
    app.dependency_overrides.clear()
