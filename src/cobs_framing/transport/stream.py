"""Binary stream sink and source.

Adapts any binary file object to the Sink/Source capabilities:
- pipes to and from subprocesses
- regular files holding captured traffic
- stdin/stdout when running as a filter

A pyserial ``Serial`` or ``socket.makefile("rwb")`` works the same way.

Streams must be in blocking mode. A non-blocking stream that reports it
has nothing to give or take (``None`` from read/write) is a transport
failure, not end of input.

Example usage:
    proc = subprocess.Popen(["device-sim"], stdin=PIPE, stdout=PIPE)
    encoder = StreamingEncoder(StreamSink(proc.stdin))
    decoder = StreamingDecoder(StreamSource(proc.stdout))

    encoder.send(b"\\x01\\x00\\x02")
    reply = decoder.read_frame()
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import BinaryIO

from ..errors import TransportError

logger = logging.getLogger(__name__)


@dataclass
class StreamConfig:
    """Configuration for stream adapters."""

    input_stream: BinaryIO | None = None  # Default: sys.stdin.buffer
    output_stream: BinaryIO | None = None  # Default: sys.stdout.buffer
    flush: bool = True  # flush after every write


class StreamSink:
    """Sink writing to a binary stream.

    Raw streams may accept fewer bytes than offered; the remainder is
    written again until the whole chunk is out.
    """

    def __init__(
        self,
        stream: BinaryIO | None = None,
        config: StreamConfig | None = None,
    ):
        self._config = config or StreamConfig()
        self._stream = stream or self._config.output_stream or sys.stdout.buffer

    def write(self, data: bytes) -> None:
        view = memoryview(data)
        try:
            while view:
                written = self._stream.write(view)
                if written is None:
                    raise TransportError("write would block: stream is non-blocking")
                view = view[written:]
            if self._config.flush:
                self._stream.flush()
        except (OSError, ValueError) as e:
            logger.error(f"Error writing to stream: {e}")
            raise TransportError(f"write failed: {e}") from e

    def close(self) -> None:
        """Close the underlying stream."""
        self._stream.close()
        logger.info("stream sink closed")


class StreamSource:
    """Source reading from a binary stream.

    Uses ``read1`` where the stream offers it so a read returns whatever
    is available instead of blocking for the full size.
    """

    def __init__(
        self,
        stream: BinaryIO | None = None,
        config: StreamConfig | None = None,
    ):
        self._config = config or StreamConfig()
        self._stream = stream or self._config.input_stream or sys.stdin.buffer
        self._read = getattr(self._stream, "read1", self._stream.read)

    def read(self, size: int) -> bytes:
        try:
            data = self._read(size)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading from stream: {e}")
            raise TransportError(f"read failed: {e}") from e
        if data is None:
            raise TransportError("read would block: stream is non-blocking")
        return data

    def close(self) -> None:
        """Close the underlying stream."""
        self._stream.close()
        logger.info("stream source closed")
