"""Streaming COBS decoder.

Pulls raw bytes from a source until a 0x00 delimiter shows up, decoding
blocks as they arrive. Bytes that follow the delimiter in the same chunk
are kept for the next frame.

Recovery: when a frame turns out to be corrupt, everything collected for
it is dropped and the error is raised. The next ``read_frame`` call starts
fresh after the delimiter that ended the bad frame, so the receiver
resynchronises without skipping good frames. When the source fails in
the middle of a frame, the rest of that frame is skipped up to its
delimiter before decoding resumes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from pydantic import BaseModel, Field

from .codec import SENTINEL, DecoderState
from .errors import DecodeError, TransportError, UnexpectedEof
from .statistics import FrameStatistics
from .transport.base import Source

logger = logging.getLogger(__name__)


class DecoderConfig(BaseModel):
    """Configuration for StreamingDecoder."""

    # Upper bound requested from the source per read
    read_size: int = Field(default=512, gt=0)


class StreamingDecoder:
    """Decodes frames from a source.

    Not safe to share between threads; give each transport its own
    decoder.
    """

    def __init__(self, source: Source, config: DecoderConfig | None = None) -> None:
        self._source = source
        self._config = config or DecoderConfig()
        self._state = DecoderState()
        self._buffer = bytearray()
        self._discard_until_delimiter = False
        self.stats = FrameStatistics()

    def read_frame(self) -> bytes:
        """Read and decode the next frame.

        Returns:
            The decoded payload

        Raises:
            UnexpectedEof: The source ended before a delimiter
            DecodeError: The frame was corrupt
            TransportError: The source failed
        """
        payload = self._next_frame()
        if payload is None:
            raise UnexpectedEof("source ended before a frame delimiter", offset=0)
        return payload

    def iter_frames(self) -> Iterator[bytes]:
        """Yield frames until the source ends cleanly between frames.

        Errors are raised as in ``read_frame``; a source that ends in the
        middle of a frame still raises ``UnexpectedEof``.
        """
        while True:
            payload = self._next_frame()
            if payload is None:
                return
            yield payload

    def __iter__(self) -> Iterator[bytes]:
        return self.iter_frames()

    def reset(self) -> None:
        """Forget any buffered input and partial frame."""
        self._state.reset()
        self._buffer.clear()
        self._discard_until_delimiter = False

    @property
    def buffered(self) -> int:
        """Number of received bytes not yet consumed by a frame."""
        return len(self._buffer)

    def _next_frame(self) -> bytes | None:
        if self._discard_until_delimiter and not self._skip_interrupted_frame():
            return None

        decoded = bytearray()
        encoded = 0
        delimited = False

        try:
            while True:
                if not self._buffer:
                    chunk = self._pull()
                    if not chunk:
                        if encoded == 0:
                            return None
                        raise UnexpectedEof(
                            f"source ended mid-frame after {encoded} byte(s)",
                            offset=encoded,
                        )
                    self._buffer += chunk

                end = self._buffer.find(SENTINEL)
                if end < 0:
                    decoded += self._state.feed(self._buffer)
                    encoded += len(self._buffer)
                    self._buffer.clear()
                    continue

                body = bytes(self._buffer[:end])
                del self._buffer[: end + 1]
                delimited = True
                decoded += self._state.feed(body)
                encoded += end + 1
                self._state.finish()
                break
        except (DecodeError, TransportError) as e:
            self._state.reset()
            # The rest of an interrupted frame may still arrive; it must not
            # be decoded as a frame of its own.
            if encoded and not delimited:
                self._discard_until_delimiter = True
            if isinstance(e, DecodeError):
                logger.warning(f"Dropping corrupt frame: {e}")
            raise

        self.stats.update(len(decoded), encoded)
        logger.debug(f"Frame received: {encoded} wire bytes, {len(decoded)} payload bytes")
        return bytes(decoded)

    def _skip_interrupted_frame(self) -> bool:
        """Drop input up to and including the next delimiter.

        Returns:
            False if the source ended before a delimiter turned up
        """
        skipped = 0
        while True:
            if not self._buffer:
                chunk = self._pull()
                if not chunk:
                    return False
                self._buffer += chunk

            end = self._buffer.find(SENTINEL)
            if end < 0:
                skipped += len(self._buffer)
                self._buffer.clear()
                continue

            skipped += end + 1
            del self._buffer[: end + 1]
            self._discard_until_delimiter = False
            logger.warning(f"Discarded {skipped} byte(s) of an interrupted frame")
            return True

    def _pull(self) -> bytes:
        try:
            return self._source.read(self._config.read_size)
        except TransportError:
            raise
        except Exception as e:
            logger.warning(f"Source failed: {e}")
            raise TransportError(f"source read failed: {e}") from e
