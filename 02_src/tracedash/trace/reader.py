"""Incremental decoder for one thread's binary trace stream.

A trace stream starts with a header, followed by back-to-back events::

    header:  u32 magic, u8[16] stream uuid, u64 thread id, u8 compression mode
    event:   u64 timestamp, u8 event type, payload

Integers are little-endian. Bytes arrive in arbitrary chunks; the reader keeps
whatever does not yet form a complete event until more bytes are appended.
"""

import struct
from dataclasses import dataclass
from typing import Callable, Iterator

from ..models import (
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

TRACE_MAGIC = 0xC1FC1FC1
TRACE_STREAM_UUID = bytes.fromhex("63a0c98f2b564bbd8c2b2a4ae25ce1a6")
COMPRESSION_NONE = 0

# Largest string or array a length prefix may announce. Anything bigger is
# treated as corruption instead of data still in flight.
MAX_ITEM_BYTES = 64 * 1024 * 1024


class TraceDecodeError(Exception):
    """Raised when buffered bytes cannot be a valid trace."""


class _NeedMoreData(Exception):
    pass


@dataclass(frozen=True)
class TraceStreamHeader:
    thread_id: int
    compression_mode: int


class _ByteReader:
    """Cursor over a buffer. Raises _NeedMoreData when reading past its end."""

    def __init__(self, data: bytearray, offset: int):
        self._data = data
        self.offset = offset

    def _take(self, size: int) -> int:
        start = self.offset
        if start + size > len(self._data):
            raise _NeedMoreData()
        self.offset += size
        return start

    def u8(self) -> int:
        return self._data[self._take(1)]

    def u32(self) -> int:
        return struct.unpack_from("<I", self._data, self._take(4))[0]

    def u64(self) -> int:
        return struct.unpack_from("<Q", self._data, self._take(8))[0]

    def raw(self, size: int) -> bytes:
        start = self._take(size)
        return bytes(self._data[start : start + size])

    def length(self, unit_size: int = 1) -> int:
        value = self.u64()
        if value * unit_size > MAX_ITEM_BYTES:
            raise TraceDecodeError(f"implausible length prefix: {value}")
        return value

    def utf8_bytes(self) -> bytes:
        return self.raw(self.length())

    def utf16_string(self) -> str:
        code_units = self.length(unit_size=2)
        data = self.raw(code_units * 2)
        try:
            return data.decode("utf-16-le")
        except UnicodeDecodeError as e:
            raise TraceDecodeError(f"invalid UTF-16 string: {e}") from e

    def cstring(self) -> str:
        end = self._data.find(0, self.offset)
        if end == -1:
            raise _NeedMoreData()
        data = self.raw(end - self.offset)
        self.offset += 1
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise TraceDecodeError(f"invalid UTF-8 string: {e}") from e


class TraceReader:
    """Stateful decoder for a single thread's trace stream."""

    def __init__(self):
        self._buffer = bytearray()
        self._cursor = 0
        self.header: TraceStreamHeader | None = None
        self._parsers: dict[int, Callable[[_ByteReader, int], TraceEvent]] = {
            TraceEventType.INIT: self._parse_init,
            TraceEventType.VSCODE_DOCUMENT_OPENED: self._parse_document_opened,
            TraceEventType.VSCODE_DOCUMENT_CLOSED: self._parse_document_closed,
            TraceEventType.VSCODE_DOCUMENT_CHANGED: self._parse_document_changed,
            TraceEventType.VSCODE_DOCUMENT_SYNC: self._parse_document_sync,
            TraceEventType.LSP_CLIENT_TO_SERVER_MESSAGE: self._parse_lsp_message,
            TraceEventType.VECTOR_MAX_SIZE_HISTOGRAM_BY_OWNER: self._parse_vector_histogram,
            TraceEventType.PROCESS_ID: self._parse_process_id,
        }

    @property
    def buffered_size(self) -> int:
        """Bytes appended but not yet decoded into events."""
        return len(self._buffer) - self._cursor

    def append_bytes(self, data: bytes | bytearray | memoryview, offset: int = 0) -> None:
        """Append data[offset:] to the pending buffer."""
        self._buffer += memoryview(data)[offset:]

    def pull_new_events(self) -> Iterator[TraceEvent]:
        """Yield every complete event buffered so far, consuming its bytes.

        A trailing partial event stays buffered for the next call. On malformed
        data the pending bytes are discarded and TraceDecodeError is raised;
        events yielded before the error stay consumed.
        """
        while True:
            reader = _ByteReader(self._buffer, self._cursor)
            try:
                if self.header is None:
                    self.header = self._parse_header(reader)
                    self._cursor = reader.offset
                    continue
                event = self._parse_event(reader)
            except _NeedMoreData:
                self._compact()
                return
            except TraceDecodeError:
                self._discard()
                raise
            self._cursor = reader.offset
            yield event

    def _compact(self) -> None:
        if self._cursor:
            del self._buffer[: self._cursor]
            self._cursor = 0

    def _discard(self) -> None:
        self._buffer.clear()
        self._cursor = 0

    def _parse_header(self, r: _ByteReader) -> TraceStreamHeader:
        magic = r.u32()
        if magic != TRACE_MAGIC:
            raise TraceDecodeError(f"bad trace magic: {magic:#010x}")
        if r.raw(16) != TRACE_STREAM_UUID:
            raise TraceDecodeError("unexpected trace stream UUID")
        thread_id = r.u64()
        compression_mode = r.u8()
        if compression_mode != COMPRESSION_NONE:
            raise TraceDecodeError(f"unsupported compression mode: {compression_mode}")
        return TraceStreamHeader(thread_id=thread_id, compression_mode=compression_mode)

    def _parse_event(self, r: _ByteReader) -> TraceEvent:
        timestamp = r.u64()
        event_type = r.u8()
        parser = self._parsers.get(event_type)
        if parser is None:
            raise TraceDecodeError(f"unknown event type: {event_type}")
        return parser(r, timestamp)

    def _parse_init(self, r: _ByteReader, timestamp: int) -> TraceEvent:
        return InitEvent(timestamp=timestamp, version=r.cstring())

    def _parse_document_opened(self, r: _ByteReader, timestamp: int) -> TraceEvent:
        return VSCodeDocumentOpenedEvent(
            timestamp=timestamp,
            document_id=r.u64(),
            uri=r.utf16_string(),
            language_id=r.utf16_string(),
            content=r.utf16_string(),
        )

    def _parse_document_closed(self, r: _ByteReader, timestamp: int) -> TraceEvent:
        return VSCodeDocumentClosedEvent(
            timestamp=timestamp,
            document_id=r.u64(),
            uri=r.utf16_string(),
            language_id=r.utf16_string(),
        )

    def _parse_document_changed(self, r: _ByteReader, timestamp: int) -> TraceEvent:
        document_id = r.u64()
        changes = []
        for _ in range(r.length()):
            start = VSCodeDocumentPosition(line=r.u64(), character=r.u64())
            end = VSCodeDocumentPosition(line=r.u64(), character=r.u64())
            changes.append(
                VSCodeDocumentChange(
                    start=start,
                    end=end,
                    range_offset=r.u64(),
                    range_length=r.u64(),
                    text=r.utf16_string(),
                )
            )
        return VSCodeDocumentChangedEvent(
            timestamp=timestamp, document_id=document_id, changes=changes
        )

    def _parse_document_sync(self, r: _ByteReader, timestamp: int) -> TraceEvent:
        return VSCodeDocumentSyncEvent(
            timestamp=timestamp,
            document_id=r.u64(),
            uri=r.utf16_string(),
            language_id=r.utf16_string(),
            content=r.utf16_string(),
        )

    def _parse_lsp_message(self, r: _ByteReader, timestamp: int) -> TraceEvent:
        return LSPClientToServerMessageEvent(timestamp=timestamp, body=r.utf8_bytes())

    def _parse_vector_histogram(self, r: _ByteReader, timestamp: int) -> TraceEvent:
        entries: dict[str, list[VectorMaxSizeHistogramEntry]] = {}
        for _ in range(r.length()):
            owner_bytes = r.utf8_bytes()
            try:
                owner = owner_bytes.decode("utf-8")
            except UnicodeDecodeError as e:
                raise TraceDecodeError(f"invalid owner name: {e}") from e
            entries[owner] = [
                VectorMaxSizeHistogramEntry(max_size=r.u64(), count=r.u64())
                for _ in range(r.length())
            ]
        return VectorMaxSizeHistogramByOwnerEvent(timestamp=timestamp, entries=entries)

    def _parse_process_id(self, r: _ByteReader, timestamp: int) -> TraceEvent:
        return ProcessIDEvent(timestamp=timestamp, process_id=r.u64())
