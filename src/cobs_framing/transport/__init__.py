"""Transport capability layer.

The framing core only ever calls ``Sink.write`` and ``Source.read``.
Concrete adapters for memory buffers and binary streams live here too.
"""

from .base import Sink, Source
from .memory import BufferSink, BufferSource
from .stream import StreamConfig, StreamSink, StreamSource

__all__ = [
    # Capabilities
    "Sink",
    "Source",
    # In-memory
    "BufferSink",
    "BufferSource",
    # Binary streams
    "StreamConfig",
    "StreamSink",
    "StreamSource",
]
