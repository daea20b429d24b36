"""Pytest configuration and shared fixtures for hubclient-core tests."""

import json
import os
from datetime import UTC, datetime

import httpx
import pytest

from hubclient_core import HubClient, HubClientConfig
from hubclient_core.testing import FrozenClock


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear hub and test environment variables before each test.

    This prevents a developer's real DOCKER_* credentials from leaking into
    credential resolution tests.
    """
    test_prefixes = ("TEST_", "DOCKER_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def clock():
    """A FrozenClock starting at a fixed instant."""
    return FrozenClock(datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC))


@pytest.fixture
def no_sleep(monkeypatch):
    """Make retry backoff instant and record the requested delays."""
    delays = []
    monkeypatch.setattr("hubclient_core.transport.retry.time.sleep", delays.append)
    return delays


class FakeTokenProvider:
    """Token provider that always returns the same token."""

    def __init__(self, token="test-token", username="alice"):
        self.token = token
        self.username = username
        self.calls = 0
        self.closed = False

    def ensure_token(self, cancel=None):
        self.calls += 1
        return self.token

    def identity(self):
        return self.username

    def close(self):
        self.closed = True


@pytest.fixture
def token_provider():
    return FakeTokenProvider()


@pytest.fixture
def make_client(no_sleep, token_provider):
    """Factory for HubClients whose network is an ``httpx.MockTransport`` handler."""
    clients = []

    def factory(handler, **config_kwargs):
        config_kwargs.setdefault("token_provider", token_provider)
        config = HubClientConfig(
            base_url="https://hub.docker.com/v2",
            transport=httpx.MockTransport(handler),
            **config_kwargs,
        )
        client = HubClient(config)
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()


class FakeHub:
    """Routing MockTransport handler keyed by ``(method, raw path with query)``."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def route(self, method, path, status_code=200, json=None):
        self.routes[(method, path)] = (status_code, json)
        return self

    def __call__(self, request):
        self.requests.append(request)
        key = (request.method, request.url.raw_path.decode())
        if key not in self.routes:
            return httpx.Response(404, json={"message": f"no route for {key}"})
        status_code, body = self.routes[key]
        return httpx.Response(status_code, json=body)

    def bodies(self):
        return [json.loads(r.content) if r.content else None for r in self.requests]


@pytest.fixture
def fake_hub(make_client):
    """A FakeHub and a HubClient talking to it."""
    hub = FakeHub()
    return hub, make_client(hub)
