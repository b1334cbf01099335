"""
Shared fixtures: a fresh application per test and a fake analytics service
patched in at the requests.Session level.
"""
import json

import pytest
import requests
from fastapi.testclient import TestClient

from app.main import create_app
from config.settings import Settings

ANALYTICS_URL = "http://analytics.test/api"


class DummyResponse:
    """Stand-in for requests.Response."""

    def __init__(self, status_code=200, body=b"", content_type="application/json", read_error=None):
        self.status_code = status_code
        self._body = body
        self.headers = {"Content-Type": content_type} if content_type else {}
        self._read_error = read_error
        self.closed = False

    @property
    def content(self):
        if self._read_error is not None:
            raise self._read_error
        return self._body

    def close(self):
        self.closed = True


class FakeAnalytics:
    """Records outgoing requests and answers them from a route table."""

    base_url = ANALYTICS_URL

    def __init__(self):
        self.calls = []
        self.routes = {}
        self.error = None
        self.default = None

    def reply(self, method, path, status_code=200, payload=None, body=None, **kwargs):
        if body is None:
            body = json.dumps(payload if payload is not None else {}).encode()
        self.routes[(method, path)] = DummyResponse(status_code, body, **kwargs)

    def broken(self):
        """Answer every request with a response whose body cannot be read."""
        self.default = DummyResponse(
            200, read_error=requests.exceptions.ChunkedEncodingError("connection cut off")
        )
        return self.default

    def unreachable(self, message="Connection refused"):
        self.error = requests.ConnectionError(message)

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        path = url[len(self.base_url):]
        if (method, path) in self.routes:
            return self.routes[(method, path)]
        return self.default or DummyResponse(404, b'{"status": "error"}')


@pytest.fixture
def analytics(monkeypatch):
    """Fake analytics service behind every requests.Session."""
    fake = FakeAnalytics()

    def fake_request(self, method, url, **kwargs):
        return fake.request(method, url, **kwargs)

    monkeypatch.setattr(requests.Session, "request", fake_request)
    return fake


@pytest.fixture
def app():
    return create_app(Settings(analytics_api_url=ANALYTICS_URL))


@pytest.fixture
def client(app, analytics):
    return TestClient(app)
