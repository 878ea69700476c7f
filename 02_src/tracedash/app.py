"""Application context and lifecycle management."""

import asyncio

import httpx

from .config import Settings
from .debug_socket import Channel, DebugServerSocket, TraceConnectionError
from .event_bus import EventBus, Subscription
from .logging_config import get_logger
from .models import LSPClientToServerMessageEvent
from .poller import VectorProfilePoller
from .views import LSPLogView, VectorProfileView

logger = get_logger(__name__)

DEMO_LSP_MESSAGES = [
    '{"method":"textDocument/didChange","jsonrpc":"2.0","params":{"contentChanges":[{"text":"console.log(\'hello world\');\\n\\n"}],"textDocument":{"uri":"file:///home/user/project/hello.js","version":4264}}}',
    '{"method":"textDocument/didChange","jsonrpc":"2.0","params":{"contentChanges":[{"text":"console.log(\'hello world\');\\n"}],"textDocument":{"uri":"file:///home/user/project/hello.js","version":4265}}}',
    '{"method":"textDocument/didChange","jsonrpc":"2.0","params":{"contentChanges":[{"text":"console.log(\'hello world\');\\n"}],"textDocument":{"uri":"file:///home/user/project/hello.js","version":4266}}}',
]


class Application:
    """Holds every view and connection of one dashboard instance."""

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings if settings is not None else Settings.from_env()
        self._http_client = http_client

        # Components (will be initialized in start())
        self._event_bus: EventBus | None = None
        self._lsp_log: LSPLogView | None = None
        self._vector_profile: VectorProfileView | None = None
        self._poller: VectorProfilePoller | None = None
        self._socket: DebugServerSocket | None = None
        self._socket_task: asyncio.Task | None = None
        self._subscriptions: list[Subscription] = []

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting dashboard", extra={"url": self.settings.debug_server_url})

        # 1. EventBus and views (no dependencies)
        self._event_bus = EventBus()
        self._lsp_log = LSPLogView()
        self._vector_profile = VectorProfileView()

        if self.settings.debug_lsp_log:
            for body in DEMO_LSP_MESSAGES:
                self._lsp_log.add_client_to_server_message(0, body)

        # 2. Poller (depends on VectorProfileView)
        self._poller = VectorProfilePoller(
            self.settings.debug_server_url,
            self._vector_profile,
            interval=self.settings.poll_interval,
            client=self._http_client,
        )
        await self._poller.start()
        logger.info("Vector profile poller started")

        # 3. Trace socket (depends on EventBus and LSPLogView)
        await self.connect()
        logger.info("All components initialized")

    async def connect(self) -> bool:
        """Open the trace connection and wire the LSP log to it. No retries."""
        try:
            self._socket = await DebugServerSocket.connect(
                self.settings.debug_server_url, event_bus=self.event_bus
            )
        except TraceConnectionError as e:
            logger.error("%s", e, extra={"url": self.settings.debug_server_url})
            return False

        self.attach_socket(self._socket)
        return True

    def attach_socket(self, socket: DebugServerSocket) -> None:
        """Subscribe the views to a connected socket and start reading from it."""
        self._socket = socket
        self._subscriptions.append(
            socket.on(Channel.LSP_CLIENT_TO_SERVER_MESSAGE, self._on_lsp_message)
        )
        self._socket_task = asyncio.create_task(socket.run())

    def _on_lsp_message(self, event: LSPClientToServerMessageEvent) -> None:
        self.lsp_log.add_client_to_server_message(event.timestamp, event.body)

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions.clear()

        if self._socket_task:
            self._socket_task.cancel()
            try:
                await self._socket_task
            except asyncio.CancelledError:
                pass
            self._socket_task = None
        if self._socket:
            await self._socket.close()
            logger.info("Trace connection closed")
        if self._poller:
            await self._poller.stop()
            logger.info("Vector profile poller stopped")

    @property
    def connected(self) -> bool:
        return self._socket_task is not None and not self._socket_task.done()

    @property
    def event_bus(self) -> EventBus:
        """Get event bus instance."""
        if not self._event_bus:
            raise RuntimeError("Application not started")
        return self._event_bus

    @property
    def lsp_log(self) -> LSPLogView:
        """Get LSP log view instance."""
        if not self._lsp_log:
            raise RuntimeError("Application not started")
        return self._lsp_log

    @property
    def vector_profile(self) -> VectorProfileView:
        """Get vector profile view instance."""
        if not self._vector_profile:
            raise RuntimeError("Application not started")
        return self._vector_profile

    @property
    def poller(self) -> VectorProfilePoller | None:
        return self._poller

    @property
    def socket(self) -> DebugServerSocket | None:
        return self._socket
