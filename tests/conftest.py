"""
Test configuration and fixtures for the Compath API.

Upstream collaborators (Steam, Gemini) are never reached from tests: routes get
fakes through app.dependency_overrides and services get httpx.MockTransport
or unittest.mock stand-ins.
"""

import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# AI features and reviewer libraries stay off unless a test injects its own collaborators
os.environ["GOOGLE_GEMINI_API_KEY"] = ""
os.environ["STEAM_API_KEY"] = ""

from compath.platform.cache.memory import ResponseCache


class FakeClock:
    """Manually advanced time source for cache expiry tests."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="session")
def test_app():
    """Create FastAPI test application."""
    from compath.main import app

    return app


@pytest.fixture(scope="function")
def client(test_app) -> Generator[TestClient, None, None]:
    """
    A TestClient with the lifespan running, so app.state.response_cache exists.
    Dependency overrides set by a test are removed afterwards.
    """
    with TestClient(test_app) as test_client:
        yield test_client
    test_app.dependency_overrides.clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> ResponseCache:
    return ResponseCache(clock=clock)


@pytest.fixture
def cached_client(client, test_app, cache):
    """Client whose routes share the `cache` fixture instead of the lifespan cache."""
    from compath.platform.cache.dependencies import get_response_cache

    test_app.dependency_overrides[get_response_cache] = lambda: cache
    yield client
