"""Background polling of the debug server's vector profiler stats."""

import asyncio

import httpx

from ..config import DEFAULT_POLL_INTERVAL, VECTOR_PROFILER_STATS_PATH
from ..logging_config import get_logger
from ..views import VectorProfileView

logger = get_logger(__name__)


def server_origin(page_url: str) -> str:
    """Scheme, host and port of page_url, with a root path."""
    return str(httpx.URL(page_url).copy_with(path="/", query=None, fragment=None))


class VectorProfilePoller:
    """Fetches /vector-profiler-stats on a fixed interval and updates the histogram view."""

    def __init__(
        self,
        page_url: str,
        view: VectorProfileView,
        interval: float = DEFAULT_POLL_INTERVAL,
        client: httpx.AsyncClient | None = None,
    ):
        self._page_url = page_url
        self._view = view
        self._interval = interval
        self._client = client
        self._owns_client = client is None
        self._running = False
        self._task: asyncio.Task | None = None
        self.polls = 0
        self.failures = 0

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start polling in the background."""
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Cancel the polling task and close the HTTP client we created."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def poll_once(self) -> None:
        """Fetch one snapshot and apply every owner's histogram to the view.

        An owner whose counts are malformed is logged and skipped; the rest of
        the snapshot is still applied.
        """
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=server_origin(self._page_url), timeout=10.0)

        response = await self._client.get(VECTOR_PROFILER_STATS_PATH)
        response.raise_for_status()
        data = response.json()

        for owner, count_by_size in data["maxSizeHistogramByOwner"].items():
            try:
                self._view.update_max_size_histogram(owner, count_by_size)
            except (TypeError, ValueError) as e:
                logger.warning("Skipping histogram: %s", e, extra={"owner": owner})
        self.polls += 1

    async def _run(self) -> None:
        while self._running:
            try:
                await self.poll_once()
            except (httpx.HTTPError, httpx.InvalidURL, ValueError, KeyError, TypeError, AttributeError) as e:
                self.failures += 1
                logger.error("Vector profile poll failed: %s", e, extra={"url": self._page_url})
            await asyncio.sleep(self._interval)
