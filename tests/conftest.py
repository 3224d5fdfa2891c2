# tests/conftest.py

import json

import httpx
import pytest

from admin_console.api_client import TrainingApiClient
from admin_console.config import ConsoleSettings


class FakeBackend:
    """
    In-memory training backend served through httpx.MockTransport.
    routes: {(method, path): response body or callable(request) -> httpx.Response}
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"detail": "Not Found"})
        if callable(handler):
            return handler(request)
        return httpx.Response(200, json=handler)

    def posted(self, path):
        return [json.loads(r.content) for r in self.requests if r.method == "POST" and r.url.path == path]


@pytest.fixture
def settings():
    return ConsoleSettings(api_base_url="http://backend.test", api_token="secret", max_retries=3, max_wait=0.0)


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def client(settings, backend, sleeps):
    c = TrainingApiClient(settings, transport=httpx.MockTransport(backend), sleep=sleeps.append)
    yield c
    c.close()
