"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import httpx
import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

UNREACHABLE_URL = "http://127.0.0.1:1/"


class FakeConnection:
    """In-memory stand-in for a websockets client connection."""

    def __init__(self, frames=()):
        self.frames = list(frames)
        self.closed = False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for frame in self.frames:
            yield frame

    async def close(self):
        self.closed = True


@pytest.fixture
def event_bus():
    """Create an empty EventBus."""
    from tracedash.event_bus import EventBus

    return EventBus()


@pytest.fixture
def trace_writer():
    """Create a TraceWriter."""
    from tracedash.trace import TraceWriter

    return TraceWriter()


@pytest.fixture
def lsp_log():
    """Create an LSPLogView."""
    from tracedash.views import LSPLogView

    return LSPLogView()


@pytest.fixture
def vector_profile():
    """Create a VectorProfileView."""
    from tracedash.views import VectorProfileView

    return VectorProfileView()


@pytest.fixture
def stats_payload():
    """Snapshot served by the mocked /vector-profiler-stats endpoint."""
    return {"maxSizeHistogramByOwner": {"libA": [10, 20, 70], "libB": [0, 5]}}


@pytest.fixture
def stats_requests():
    """Requests seen by the mocked debug server."""
    return []


@pytest.fixture
def http_client(stats_payload, stats_requests):
    """AsyncClient whose transport answers like a debug server."""

    def handler(request: httpx.Request) -> httpx.Response:
        stats_requests.append(request)
        if request.url.path == "/vector-profiler-stats":
            return httpx.Response(200, json=stats_payload)
        return httpx.Response(404)

    return httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://debug.test"
    )


@pytest.fixture
def settings():
    """Settings pointing at a port nothing listens on."""
    from tracedash.config import Settings

    return Settings(debug_server_url=UNREACHABLE_URL, poll_interval=0.01)
