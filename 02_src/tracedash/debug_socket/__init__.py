"""Trace stream demultiplexer."""

from .debug_socket import (
    CHANNEL_BY_EVENT_TYPE,
    Channel,
    DebugServerSocket,
    TraceConnectionError,
    trace_url,
)

__all__ = [
    "CHANNEL_BY_EVENT_TYPE",
    "Channel",
    "DebugServerSocket",
    "TraceConnectionError",
    "trace_url",
]
