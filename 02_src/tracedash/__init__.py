"""LSP trace dashboard."""

from .app import Application
from .config import Settings
from .debug_socket import Channel, DebugServerSocket, TraceConnectionError
from .event_bus import EventBus, IEventBus, Subscription
from .models import LogEntry, TraceEvent, TraceEventType
from .poller import VectorProfilePoller
from .trace import TraceDecodeError, TraceReader, TraceWriter
from .views import LSPLogDetailsView, LSPLogView, VectorProfileView

__all__ = [
    # Application
    "Application",
    "Settings",
    # Models
    "LogEntry",
    "TraceEvent",
    "TraceEventType",
    # Components
    "EventBus",
    "IEventBus",
    "Subscription",
    "TraceReader",
    "TraceWriter",
    "TraceDecodeError",
    "DebugServerSocket",
    "Channel",
    "TraceConnectionError",
    "LSPLogView",
    "LSPLogDetailsView",
    "VectorProfileView",
    "VectorProfilePoller",
]
