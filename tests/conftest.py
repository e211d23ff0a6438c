"""Pytest configuration and fixtures."""

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from core.config import Config, RoutingSettings


class RecordingLogger:
    """RequestLogger that keeps every event in memory."""

    def __init__(self):
        self.proxied: list[tuple[str, str, int]] = []
        self.fallbacks: list[str] = []
        self.errors: list[tuple[str, int, str]] = []

    def log_proxied(self, method: str, target: str, status: int) -> None:
        self.proxied.append((method, target, status))

    def log_fallback(self, path: str) -> None:
        self.fallbacks.append(path)

    def log_error(self, target: str, status: int, message: str) -> None:
        self.errors.append((target, status, message))


@pytest.fixture
def recording_logger():
    """In-memory request logger."""
    return RecordingLogger()


@pytest.fixture
def prefix_config():
    """Default config: prefix-marker mode with /proxx/."""
    return Config()


@pytest.fixture
def bare_config():
    """Bare-path mode config."""
    return Config(routing=RoutingSettings(mode="bare"))


@pytest.fixture
def make_client(recording_logger):
    """Factory for a TestClient whose upstream is an httpx.MockTransport."""
    clients = []

    def _make(handler, config: Config | None = None) -> TestClient:
        app = create_app(
            config or Config(),
            recording_logger,
            transport=httpx.MockTransport(handler),
        )
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def unreachable():
    """Upstream handler for tests that must never reach the upstream."""

    def _handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError(f"unexpected upstream call to {request.url}")

    return _handler
