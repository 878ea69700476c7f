"""Tests for TraceReader and TraceWriter."""

from dataclasses import dataclass
from typing import ClassVar

import pytest

from tracedash.models import (
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
from tracedash.trace import TraceDecodeError, TraceReader, TraceWriter
from tracedash.trace.reader import MAX_ITEM_BYTES, TRACE_MAGIC

EVENTS = [
    InitEvent(timestamp=1, version="2.4.2"),
    VSCodeDocumentOpenedEvent(
        timestamp=2, document_id=7, uri="file:///a.js", language_id="javascript", content="héllo 🙂"
    ),
    VSCodeDocumentChangedEvent(
        timestamp=3,
        document_id=7,
        changes=[
            VSCodeDocumentChange(
                start=VSCodeDocumentPosition(line=0, character=1),
                end=VSCodeDocumentPosition(line=0, character=2),
                range_offset=1,
                range_length=1,
                text="E",
            )
        ],
    ),
    VSCodeDocumentSyncEvent(
        timestamp=4, document_id=7, uri="file:///a.js", language_id="javascript", content="hEllo"
    ),
    LSPClientToServerMessageEvent(timestamp=5, body=b'{"jsonrpc":"2.0","method":"initialized"}'),
    VectorMaxSizeHistogramByOwnerEvent(
        timestamp=6,
        entries={"owner": [VectorMaxSizeHistogramEntry(max_size=0, count=3)]},
    ),
    ProcessIDEvent(timestamp=7, process_id=1234),
    VSCodeDocumentClosedEvent(timestamp=8, document_id=7, uri="file:///a.js", language_id="javascript"),
]


@dataclass(frozen=True)
class UnencodableEvent(TraceEvent):
    event_type: ClassVar[TraceEventType] = TraceEventType.PROCESS_ID


def encode_stream(events, thread_id=1):
    writer = TraceWriter()
    writer.write_header(thread_id)
    for event in events:
        writer.write_event(event)
    return writer.getvalue()


def decode_chunks(chunks):
    reader = TraceReader()
    events = []
    for chunk in chunks:
        reader.append_bytes(chunk)
        events.extend(reader.pull_new_events())
    return events


class TestTraceReaderDecode:
    """Tests for decoding complete streams."""

    def test_decode_all_event_types(self):
        """Test that every event type decodes to what was written."""
        assert decode_chunks([encode_stream(EVENTS)]) == EVENTS

    def test_header_is_recorded(self):
        """Test that the stream header is parsed once."""
        reader = TraceReader()
        reader.append_bytes(encode_stream([], thread_id=99))

        assert list(reader.pull_new_events()) == []
        assert reader.header is not None
        assert reader.header.thread_id == 99

    def test_event_type_tags(self):
        """Test that decoded events carry their type tag."""
        events = decode_chunks([encode_stream(EVENTS)])

        assert events[0].event_type == TraceEventType.INIT
        assert events[4].event_type == TraceEventType.LSP_CLIENT_TO_SERVER_MESSAGE

    def test_append_bytes_offset(self):
        """Test that bytes before the offset are skipped."""
        reader = TraceReader()
        reader.append_bytes(b"\xff" * 8 + encode_stream(EVENTS[:1]), 8)

        assert list(reader.pull_new_events()) == EVENTS[:1]


class TestTraceReaderReassembly:
    """Tests for streams split across chunks."""

    def test_every_two_way_split(self):
        """Test that splitting at any byte boundary decodes identically."""
        data = encode_stream(EVENTS[:5])
        expected = decode_chunks([data])

        for i in range(len(data) + 1):
            assert decode_chunks([data[:i], data[i:]]) == expected

    def test_byte_at_a_time(self):
        """Test feeding one byte per chunk."""
        data = encode_stream(EVENTS)

        assert decode_chunks([data[i : i + 1] for i in range(len(data))]) == EVENTS

    def test_partial_event_stays_buffered(self):
        """Test that a trailing partial event waits for more bytes."""
        data = encode_stream(EVENTS[:2])
        reader = TraceReader()
        reader.append_bytes(data[:-3])

        assert list(reader.pull_new_events()) == EVENTS[:1]
        assert reader.buffered_size > 0

        reader.append_bytes(data[-3:])
        assert list(reader.pull_new_events()) == EVENTS[1:2]
        assert reader.buffered_size == 0

    def test_pull_is_restartable(self):
        """Test that an abandoned generator leaves remaining events for the next call."""
        reader = TraceReader()
        reader.append_bytes(encode_stream(EVENTS[:3]))

        first = next(reader.pull_new_events())

        assert first == EVENTS[0]
        assert list(reader.pull_new_events()) == EVENTS[1:3]


class TestTraceReaderErrors:
    """Tests for malformed streams."""

    def test_bad_magic(self):
        """Test that a wrong magic number is rejected."""
        reader = TraceReader()
        reader.append_bytes(b"\x00" * 32)

        with pytest.raises(TraceDecodeError, match="magic"):
            list(reader.pull_new_events())

    def test_unknown_event_type(self):
        """Test that an unknown event type is rejected."""
        data = encode_stream([]) + (9).to_bytes(8, "little") + bytes([200])
        reader = TraceReader()
        reader.append_bytes(data)

        with pytest.raises(TraceDecodeError, match="unknown event type"):
            list(reader.pull_new_events())

    def test_unsupported_compression(self):
        """Test that compressed streams are rejected."""
        data = bytearray(encode_stream([]))
        data[-1] = 1
        reader = TraceReader()
        reader.append_bytes(data)

        with pytest.raises(TraceDecodeError, match="compression"):
            list(reader.pull_new_events())

    def test_oversized_length_prefix(self):
        """Test that a length beyond MAX_ITEM_BYTES is an error, not a wait."""
        data = (
            encode_stream([])
            + (9).to_bytes(8, "little")
            + bytes([TraceEventType.LSP_CLIENT_TO_SERVER_MESSAGE])
            + (MAX_ITEM_BYTES + 1).to_bytes(8, "little")
        )
        reader = TraceReader()
        reader.append_bytes(data)

        with pytest.raises(TraceDecodeError, match="length prefix"):
            list(reader.pull_new_events())
        assert reader.buffered_size == 0

    def test_utf16_length_counts_code_units(self):
        """Test that UTF-16 lengths are bounded by their size in bytes."""
        data = (
            encode_stream([])
            + (9).to_bytes(8, "little")
            + bytes([TraceEventType.VSCODE_DOCUMENT_CLOSED])
            + (1).to_bytes(8, "little")
            + (MAX_ITEM_BYTES // 2 + 1).to_bytes(8, "little")
        )
        reader = TraceReader()
        reader.append_bytes(data)

        with pytest.raises(TraceDecodeError, match="length prefix"):
            list(reader.pull_new_events())

    def test_length_at_limit_waits_for_data(self):
        """Test that a plausible length keeps the partial event buffered."""
        data = (
            encode_stream([])
            + (9).to_bytes(8, "little")
            + bytes([TraceEventType.LSP_CLIENT_TO_SERVER_MESSAGE])
            + MAX_ITEM_BYTES.to_bytes(8, "little")
        )
        reader = TraceReader()
        reader.append_bytes(data)

        assert list(reader.pull_new_events()) == []
        assert reader.buffered_size == 17

    def test_events_before_error_are_kept(self):
        """Test that events decoded before a fault are still delivered."""
        data = encode_stream(EVENTS[:2]) + (9).to_bytes(8, "little") + bytes([200])
        reader = TraceReader()
        reader.append_bytes(data)
        events = []

        with pytest.raises(TraceDecodeError):
            for event in reader.pull_new_events():
                events.append(event)

        assert events == EVENTS[:2]

    def test_recovers_after_error(self):
        """Test that bytes appended after a fault are decoded on their own."""
        writer = TraceWriter()
        writer.write_event(EVENTS[4])
        reader = TraceReader()
        reader.append_bytes(encode_stream([]) + (9).to_bytes(8, "little") + bytes([200]))
        with pytest.raises(TraceDecodeError):
            list(reader.pull_new_events())

        assert reader.buffered_size == 0
        reader.append_bytes(writer.getvalue())
        assert list(reader.pull_new_events()) == [EVENTS[4]]

    def test_magic_constant(self):
        """Test that the header starts with the little-endian magic."""
        assert encode_stream([])[:4] == TRACE_MAGIC.to_bytes(4, "little")


class TestTraceWriter:
    """Tests for TraceWriter."""

    def test_take_resets_buffer(self, trace_writer):
        """Test that take() returns and clears the output."""
        trace_writer.write_header(1)
        data = trace_writer.take()

        assert len(data) == 4 + 16 + 8 + 1
        assert trace_writer.getvalue() == b""

    def test_write_unknown_event(self, trace_writer):
        """Test that event classes without an encoding are refused and leave no bytes."""
        trace_writer.write_header(1)
        header = trace_writer.getvalue()

        with pytest.raises(TypeError, match="cannot encode UnencodableEvent"):
            trace_writer.write_event(UnencodableEvent(timestamp=0))
        assert trace_writer.getvalue() == header
