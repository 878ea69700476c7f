"""Core data models for the trace dashboard."""

from .histogram import HistogramBlock, HistogramRow
from .lsp import LogEntry, MessageCategory
from .trace import (
    InitEvent,
    LSPClientToServerMessageEvent,
    ProcessIDEvent,
    TraceEvent,
    TraceEventType,
    VectorMaxSizeHistogramByOwnerEvent,
    VectorMaxSizeHistogramEntry,
    VSCodeDocumentChange,
    VSCodeDocumentChangedEvent,
    VSCodeDocumentClosedEvent,
    VSCodeDocumentOpenedEvent,
    VSCodeDocumentPosition,
    VSCodeDocumentSyncEvent,
)

__all__ = [
    # Trace
    "TraceEvent",
    "TraceEventType",
    "InitEvent",
    "VSCodeDocumentOpenedEvent",
    "VSCodeDocumentClosedEvent",
    "VSCodeDocumentChangedEvent",
    "VSCodeDocumentChange",
    "VSCodeDocumentPosition",
    "VSCodeDocumentSyncEvent",
    "LSPClientToServerMessageEvent",
    "VectorMaxSizeHistogramByOwnerEvent",
    "VectorMaxSizeHistogramEntry",
    "ProcessIDEvent",
    # LSP log
    "LogEntry",
    "MessageCategory",
    # Histogram
    "HistogramBlock",
    "HistogramRow",
]
