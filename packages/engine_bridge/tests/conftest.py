"""
Pytest fixtures for engine bridge tests.
"""

from typing import Any, Callable

import httpx
import pytest

from basecore import correlation
from basecore.settings import get_settings
from engine_bridge.engine.base import EngineEventResult


class FakeResult(EngineEventResult):
    """Engine result with fixed properties; values may be callables that raise."""

    def __init__(self, properties: dict[str, Any]):
        self._properties = properties

    @property
    def property_names(self) -> list[str]:
        return list(self._properties)

    def get(self, name: str) -> Any:
        value = self._properties[name]
        if callable(value):
            return value()
        return value


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            request.read()
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


@pytest.fixture(autouse=True)
def fresh_state():
    """Reset cached settings and the correlation context around each test."""
    get_settings.cache_clear()
    correlation.clear()
    yield
    correlation.clear()
    get_settings.cache_clear()


@pytest.fixture
def make_result():
    """Factory for engine results with fixed properties."""
    return FakeResult


@pytest.fixture
def correlator_header():
    """Configured correlator header name."""
    return get_settings().CORRELATOR_HEADER


@pytest.fixture
def make_transport():
    """Factory for recording transports."""

    def _make(status_code: int = 200, text: str = "", handler=None) -> RecordingTransport:
        if handler is None:
            def handler(request):
                return httpx.Response(status_code, text=text)
        return RecordingTransport(handler)

    return _make
