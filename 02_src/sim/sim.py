"""SIM implementation - scripted debug server for local runs and tests."""

import asyncio
import json
import random
from typing import Iterable

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from tracedash.config import TRACE_PATH, VECTOR_PROFILER_STATS_PATH
from tracedash.logging_config import get_logger
from tracedash.models import (
    InitEvent,
    LSPClientToServerMessageEvent,
    ProcessIDEvent,
    TraceEvent,
    VSCodeDocumentChange,
    VSCodeDocumentChangedEvent,
    VSCodeDocumentClosedEvent,
    VSCodeDocumentOpenedEvent,
    VSCodeDocumentPosition,
)
from tracedash.trace import TraceWriter, encode_frame

logger = get_logger(__name__)

VECTOR_OWNERS = [
    "parse_expression_remainder",
    "lexer::insert_semicolon",
    "linter::scope_stack",
]
HISTOGRAM_BUCKETS = 8


def _lsp(message: dict) -> bytes:
    return json.dumps(message, separators=(",", ":")).encode("utf-8")


class Sim:
    """Scripted trace for a few threads of an editor session."""

    def __init__(
        self,
        thread_ids: Iterable[int] = (1, 2),
        seed: int | None = None,
        max_chunk_size: int = 64,
    ):
        self.thread_ids = list(thread_ids)
        self._rng = random.Random(seed)
        self._max_chunk_size = max_chunk_size

    def thread_events(self, thread_id: int) -> list[TraceEvent]:
        """The events one thread emits, in order."""
        uri = f"file:///tmp/sim/thread{thread_id}.js"
        document_id = 0x1000 + thread_id
        t = thread_id * 1_000_000
        return [
            InitEvent(timestamp=t, version="2.4.2"),
            ProcessIDEvent(timestamp=t + 1, process_id=4000 + thread_id),
            LSPClientToServerMessageEvent(
                timestamp=t + 2,
                body=_lsp({"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {"processId": None, "rootUri": None}}),
            ),
            LSPClientToServerMessageEvent(
                timestamp=t + 3,
                body=_lsp({"jsonrpc": "2.0", "method": "initialized", "params": {}}),
            ),
            VSCodeDocumentOpenedEvent(
                timestamp=t + 4,
                document_id=document_id,
                uri=uri,
                language_id="javascript",
                content="let x = 1;\n",
            ),
            LSPClientToServerMessageEvent(
                timestamp=t + 5,
                body=_lsp({
                    "jsonrpc": "2.0",
                    "method": "textDocument/didChange",
                    "params": {
                        "textDocument": {"uri": uri, "version": 2},
                        "contentChanges": [{"text": "let x = 2;\n"}],
                    },
                }),
            ),
            VSCodeDocumentChangedEvent(
                timestamp=t + 6,
                document_id=document_id,
                changes=[
                    VSCodeDocumentChange(
                        start=VSCodeDocumentPosition(line=0, character=8),
                        end=VSCodeDocumentPosition(line=0, character=9),
                        range_offset=8,
                        range_length=1,
                        text="2",
                    )
                ],
            ),
            LSPClientToServerMessageEvent(
                timestamp=t + 7,
                body=_lsp({"jsonrpc": "2.0", "id": 1, "result": None}),
            ),
            VSCodeDocumentClosedEvent(
                timestamp=t + 8,
                document_id=document_id,
                uri=uri,
                language_id="javascript",
            ),
        ]

    def thread_stream(self, thread_id: int) -> bytes:
        """Encoded trace stream of one thread, header included."""
        writer = TraceWriter()
        writer.write_header(thread_id)
        for event in self.thread_events(thread_id):
            writer.write_event(event)
        return writer.getvalue()

    def split(self, data: bytes) -> list[bytes]:
        """Cut data into chunks at random byte boundaries."""
        chunks = []
        offset = 0
        while offset < len(data):
            size = self._rng.randint(1, self._max_chunk_size)
            chunks.append(data[offset : offset + size])
            offset += size
        return chunks

    def trace_frames(self) -> list[bytes]:
        """All threads' chunks as transport frames, randomly interleaved."""
        pending = {
            thread_id: self.split(self.thread_stream(thread_id))
            for thread_id in self.thread_ids
        }
        frames = []
        while pending:
            thread_id = self._rng.choice(list(pending))
            frames.append(encode_frame(thread_id, pending[thread_id].pop(0)))
            if not pending[thread_id]:
                del pending[thread_id]
        return frames

    def vector_profile_stats(self) -> dict:
        """A fresh random /vector-profiler-stats snapshot."""
        return {
            "maxSizeHistogramByOwner": {
                owner: [self._rng.randint(0, 50) for _ in range(HISTOGRAM_BUCKETS)]
                for owner in VECTOR_OWNERS
            }
        }


def create_sim_app(sim: Sim | None = None, frame_delay: float = 0.05) -> FastAPI:
    """Create a FastAPI app serving the SIM trace and vector profile stats."""
    sim = sim if sim is not None else Sim()
    app = FastAPI(title="Trace SIM", version="0.1.0")

    @app.get(VECTOR_PROFILER_STATS_PATH)
    async def vector_profiler_stats() -> dict:
        """Random vector max-size histograms."""
        return sim.vector_profile_stats()

    @app.websocket(TRACE_PATH)
    async def trace(websocket: WebSocket) -> None:
        """Stream the scripted trace, then stay open until the client leaves."""
        await websocket.accept()
        frames = sim.trace_frames()
        logger.info("SIM: streaming %d trace frames", len(frames))
        try:
            for frame in frames:
                await websocket.send_bytes(frame)
                if frame_delay:
                    await asyncio.sleep(frame_delay)

            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
        except WebSocketDisconnect:
            pass
        logger.info("SIM: trace client disconnected")

    return app
