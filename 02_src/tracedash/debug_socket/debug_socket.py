"""WebSocket client that demultiplexes per-thread trace streams into channel events."""

import asyncio
import struct
from enum import Enum
from typing import Any

import httpx
import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from ..config import TRACE_PATH
from ..event_bus import EventBus, IEventBus, Listener, Subscription
from ..logging_config import get_logger
from ..models import TraceEventType
from ..trace import TraceDecodeError, TraceReader

logger = get_logger(__name__)

THREAD_ID = struct.Struct("<Q")


class Channel(str, Enum):
    """EventBus channels, one per routed trace event type."""

    INIT = "init_event"
    VSCODE_DOCUMENT_OPENED = "vscode_document_opened_event"
    VSCODE_DOCUMENT_CLOSED = "vscode_document_closed_event"
    VSCODE_DOCUMENT_CHANGED = "vscode_document_changed_event"
    VSCODE_DOCUMENT_SYNC = "vscode_document_sync_event"
    LSP_CLIENT_TO_SERVER_MESSAGE = "lsp_client_to_server_message_event"
    UNKNOWN = "unknown_trace_event"


CHANNEL_BY_EVENT_TYPE: dict[TraceEventType, Channel] = {
    TraceEventType.INIT: Channel.INIT,
    TraceEventType.VSCODE_DOCUMENT_OPENED: Channel.VSCODE_DOCUMENT_OPENED,
    TraceEventType.VSCODE_DOCUMENT_CLOSED: Channel.VSCODE_DOCUMENT_CLOSED,
    TraceEventType.VSCODE_DOCUMENT_CHANGED: Channel.VSCODE_DOCUMENT_CHANGED,
    TraceEventType.VSCODE_DOCUMENT_SYNC: Channel.VSCODE_DOCUMENT_SYNC,
    TraceEventType.LSP_CLIENT_TO_SERVER_MESSAGE: Channel.LSP_CLIENT_TO_SERVER_MESSAGE,
}


class TraceConnectionError(ConnectionError):
    """The trace WebSocket could not be opened."""


def trace_url(page_url: str) -> str:
    """Trace endpoint for a debug server page: same host, /api/trace path, ws scheme."""
    url = httpx.URL(page_url)
    scheme = "wss" if url.scheme == "https" else "ws"
    return str(url.copy_with(scheme=scheme, path=TRACE_PATH))


class DebugServerSocket:
    """Routes each inbound frame to its thread's TraceReader and publishes decoded events."""

    def __init__(self, connection: Any, event_bus: IEventBus | None = None, url: str = ""):
        self._connection = connection
        self._event_bus = event_bus if event_bus is not None else EventBus()
        self.url = url
        self._trace_readers: dict[int, TraceReader] = {}  # Key is the thread id
        self.frames_handled = 0
        self.frames_failed = 0

    @classmethod
    async def connect(
        cls,
        page_url: str,
        event_bus: IEventBus | None = None,
        open_timeout: float = 10.0,
    ) -> "DebugServerSocket":
        """Open the trace WebSocket derived from page_url. No retries."""
        url = page_url
        try:
            url = trace_url(page_url)
            connection = await websockets.connect(url, open_timeout=open_timeout, max_size=None)
        except (httpx.InvalidURL, OSError, asyncio.TimeoutError, WebSocketException) as e:
            raise TraceConnectionError(f"failed to connect to WebSocket at {url}") from e

        logger.info("Connected to trace server", extra={"url": url})
        return cls(connection, event_bus=event_bus, url=url)

    @property
    def thread_ids(self) -> list[int]:
        """Threads seen so far, in order of first frame."""
        return list(self._trace_readers)

    def on(self, channel: str, listener: Listener) -> Subscription:
        """Subscribe a listener to a channel."""
        return self._event_bus.subscribe(channel, listener)

    def handle_message(self, data: bytes) -> None:
        """Decode one frame and publish its events. Never raises."""
        self.frames_handled += 1
        thread_id = None
        try:
            if len(data) < THREAD_ID.size:
                raise TraceDecodeError(f"frame too short: {len(data)} bytes")
            (thread_id,) = THREAD_ID.unpack_from(data)
            self._dispatch(thread_id, data)
        except Exception:
            self.frames_failed += 1
            logger.exception("Failed to process trace frame", extra={"thread_id": thread_id})

    def _dispatch(self, thread_id: int, data: bytes) -> None:
        reader = self._trace_readers.get(thread_id)
        if reader is None:
            reader = TraceReader()
            self._trace_readers[thread_id] = reader

        reader.append_bytes(data, THREAD_ID.size)
        for event in reader.pull_new_events():
            channel = CHANNEL_BY_EVENT_TYPE.get(event.event_type, Channel.UNKNOWN)
            logger.debug(
                "Trace event %s", type(event).__name__,
                extra={"thread_id": thread_id, "channel": channel.value},
            )
            self._event_bus.publish(channel, event)

    async def run(self) -> None:
        """Handle inbound frames in arrival order until the connection ends."""
        try:
            async for message in self._connection:
                if isinstance(message, str):
                    logger.warning("Ignoring text frame from trace server", extra={"url": self.url})
                    continue
                self.handle_message(message)
        except ConnectionClosed as e:
            logger.warning("Trace connection closed: %s", e, extra={"url": self.url})
        logger.info("Trace stream ended", extra={"url": self.url})

    async def close(self) -> None:
        """Close the connection."""
        await self._connection.close()
