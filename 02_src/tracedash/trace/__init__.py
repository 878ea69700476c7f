"""Binary trace stream codec."""

from .reader import TraceDecodeError, TraceReader, TraceStreamHeader
from .writer import TraceWriter, encode_frame

__all__ = [
    "TraceDecodeError",
    "TraceReader",
    "TraceStreamHeader",
    "TraceWriter",
    "encode_frame",
]
