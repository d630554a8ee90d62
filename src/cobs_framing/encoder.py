"""Streaming COBS encoder.

Payload bytes go in through ``write``; each block is handed to the sink
as soon as its length byte is known. ``finish`` closes the frame with its
final block and the 0x00 delimiter.
"""

from __future__ import annotations

import logging

from .codec import DELIMITER, EncoderState
from .errors import TransportError
from .statistics import FrameStatistics
from .transport.base import Sink

logger = logging.getLogger(__name__)


class StreamingEncoder:
    """Encodes frames onto a sink.

    One instance owns one frame in progress at a time. It is not safe to
    share an instance between threads.

    If the sink fails, whatever it already accepted stays on the wire and
    the frame in progress is abandoned; call ``reset()`` before reusing
    the encoder.
    """

    def __init__(self, sink: Sink) -> None:
        self._sink = sink
        self._state = EncoderState()
        self._raw = 0
        self._encoded = 0
        self.stats = FrameStatistics()

    def write(self, data: bytes) -> None:
        """Add payload bytes to the current frame."""
        self._raw += len(data)
        self._send(self._state.feed(data))

    def finish(self) -> int:
        """Terminate the current frame.

        Returns:
            Number of bytes the frame occupied on the wire, delimiter included
        """
        try:
            self._send(self._state.flush() + DELIMITER)
        finally:
            # A failed frame must not leak into the next frame's counts
            raw, total = self._raw, self._encoded
            self._raw = 0
            self._encoded = 0
        self.stats.update(raw, total)
        logger.debug(f"Frame sent: {raw} payload bytes, {total} wire bytes")
        return total

    def send(self, payload: bytes) -> int:
        """Encode ``payload`` as one complete frame."""
        self.write(payload)
        return self.finish()

    def reset(self) -> None:
        """Drop the frame in progress without emitting anything."""
        self._state.reset()
        self._raw = 0
        self._encoded = 0

    def _send(self, chunk: bytes) -> None:
        if not chunk:
            return
        try:
            self._sink.write(chunk)
        except TransportError:
            raise
        except Exception as e:
            logger.warning(f"Sink failed after {self._encoded} bytes of frame: {e}")
            raise TransportError(f"sink write failed: {e}") from e
        self._encoded += len(chunk)


def send_frame(sink: Sink, payload: bytes) -> int:
    """Write ``payload`` to ``sink`` as one frame with a throwaway encoder."""
    return StreamingEncoder(sink).send(payload)
