"""Encoder producing the binary trace format read by TraceReader."""

import struct

from ..models import (
    InitEvent,
    LSPClientToServerMessageEvent,
    ProcessIDEvent,
    TraceEvent,
    VectorMaxSizeHistogramByOwnerEvent,
    VSCodeDocumentChangedEvent,
    VSCodeDocumentClosedEvent,
    VSCodeDocumentOpenedEvent,
    VSCodeDocumentSyncEvent,
)
from .reader import COMPRESSION_NONE, TRACE_MAGIC, TRACE_STREAM_UUID


class TraceWriter:
    """Accumulates an encoded trace stream in memory."""

    def __init__(self):
        self._out = bytearray()

    def getvalue(self) -> bytes:
        return bytes(self._out)

    def take(self) -> bytes:
        """Return everything written so far and reset the buffer."""
        data = bytes(self._out)
        self._out.clear()
        return data

    def write_header(self, thread_id: int) -> None:
        self._u32(TRACE_MAGIC)
        self._out += TRACE_STREAM_UUID
        self._u64(thread_id)
        self._u8(COMPRESSION_NONE)

    def write_event(self, event: TraceEvent) -> None:
        start = len(self._out)
        self._u64(event.timestamp)
        self._u8(event.event_type)

        if isinstance(event, InitEvent):
            self._out += event.version.encode("utf-8") + b"\0"
        elif isinstance(event, (VSCodeDocumentOpenedEvent, VSCodeDocumentSyncEvent)):
            self._u64(event.document_id)
            self._utf16(event.uri)
            self._utf16(event.language_id)
            self._utf16(event.content)
        elif isinstance(event, VSCodeDocumentClosedEvent):
            self._u64(event.document_id)
            self._utf16(event.uri)
            self._utf16(event.language_id)
        elif isinstance(event, VSCodeDocumentChangedEvent):
            self._u64(event.document_id)
            self._u64(len(event.changes))
            for change in event.changes:
                self._u64(change.start.line)
                self._u64(change.start.character)
                self._u64(change.end.line)
                self._u64(change.end.character)
                self._u64(change.range_offset)
                self._u64(change.range_length)
                self._utf16(change.text)
        elif isinstance(event, LSPClientToServerMessageEvent):
            self._utf8(event.body)
        elif isinstance(event, VectorMaxSizeHistogramByOwnerEvent):
            self._u64(len(event.entries))
            for owner, entries in event.entries.items():
                self._utf8(owner.encode("utf-8"))
                self._u64(len(entries))
                for entry in entries:
                    self._u64(entry.max_size)
                    self._u64(entry.count)
        elif isinstance(event, ProcessIDEvent):
            self._u64(event.process_id)
        else:
            del self._out[start:]
            raise TypeError(f"cannot encode {type(event).__name__}")

    def _u8(self, value: int) -> None:
        self._out += struct.pack("<B", value)

    def _u32(self, value: int) -> None:
        self._out += struct.pack("<I", value)

    def _u64(self, value: int) -> None:
        self._out += struct.pack("<Q", value)

    def _utf8(self, data: bytes) -> None:
        self._u64(len(data))
        self._out += data

    def _utf16(self, text: str) -> None:
        data = text.encode("utf-16-le")
        self._u64(len(data) // 2)
        self._out += data


def encode_frame(thread_id: int, payload: bytes) -> bytes:
    """Prefix a trace chunk with its 8-byte little-endian thread id."""
    return struct.pack("<Q", thread_id) + payload
