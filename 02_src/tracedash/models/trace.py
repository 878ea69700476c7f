"""Trace event data models."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar


class TraceEventType(IntEnum):
    """Event type tags as they appear on the wire."""

    INIT = 1
    VSCODE_DOCUMENT_OPENED = 2
    VSCODE_DOCUMENT_CLOSED = 3
    VSCODE_DOCUMENT_CHANGED = 4
    VSCODE_DOCUMENT_SYNC = 5
    LSP_CLIENT_TO_SERVER_MESSAGE = 6
    VECTOR_MAX_SIZE_HISTOGRAM_BY_OWNER = 7
    PROCESS_ID = 8


@dataclass(frozen=True)
class TraceEvent:
    """Base class for decoded trace events."""

    event_type: ClassVar[TraceEventType]

    timestamp: int


@dataclass(frozen=True)
class InitEvent(TraceEvent):
    event_type: ClassVar[TraceEventType] = TraceEventType.INIT

    version: str


@dataclass(frozen=True)
class VSCodeDocumentOpenedEvent(TraceEvent):
    event_type: ClassVar[TraceEventType] = TraceEventType.VSCODE_DOCUMENT_OPENED

    document_id: int
    uri: str
    language_id: str
    content: str


@dataclass(frozen=True)
class VSCodeDocumentClosedEvent(TraceEvent):
    event_type: ClassVar[TraceEventType] = TraceEventType.VSCODE_DOCUMENT_CLOSED

    document_id: int
    uri: str
    language_id: str


@dataclass(frozen=True)
class VSCodeDocumentPosition:
    line: int
    character: int


@dataclass(frozen=True)
class VSCodeDocumentChange:
    """One content change of a VS Code document edit."""

    start: VSCodeDocumentPosition
    end: VSCodeDocumentPosition
    range_offset: int
    range_length: int
    text: str


@dataclass(frozen=True)
class VSCodeDocumentChangedEvent(TraceEvent):
    event_type: ClassVar[TraceEventType] = TraceEventType.VSCODE_DOCUMENT_CHANGED

    document_id: int
    changes: list[VSCodeDocumentChange] = field(default_factory=list)


@dataclass(frozen=True)
class VSCodeDocumentSyncEvent(TraceEvent):
    event_type: ClassVar[TraceEventType] = TraceEventType.VSCODE_DOCUMENT_SYNC

    document_id: int
    uri: str
    language_id: str
    content: str


@dataclass(frozen=True)
class LSPClientToServerMessageEvent(TraceEvent):
    """A raw JSON-RPC message sent by the editor to the language server."""

    event_type: ClassVar[TraceEventType] = TraceEventType.LSP_CLIENT_TO_SERVER_MESSAGE

    body: bytes  # UTF-8 JSON text


@dataclass(frozen=True)
class VectorMaxSizeHistogramEntry:
    max_size: int
    count: int


@dataclass(frozen=True)
class VectorMaxSizeHistogramByOwnerEvent(TraceEvent):
    event_type: ClassVar[TraceEventType] = TraceEventType.VECTOR_MAX_SIZE_HISTOGRAM_BY_OWNER

    entries: dict[str, list[VectorMaxSizeHistogramEntry]] = field(default_factory=dict)


@dataclass(frozen=True)
class ProcessIDEvent(TraceEvent):
    event_type: ClassVar[TraceEventType] = TraceEventType.PROCESS_ID

    process_id: int
