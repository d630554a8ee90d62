"""Error taxonomy for COBS framing.

Decode failures describe what was wrong with the bytes on the wire.
Transport failures wrap whatever the underlying sink or source raised;
the original exception is kept as ``__cause__`` and never interpreted.
"""

from __future__ import annotations


class CobsError(Exception):
    """Base class for all framing errors."""

    pass


class DecodeError(CobsError):
    """A frame could not be decoded."""

    def __init__(self, message: str, offset: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.offset = offset


class MalformedFrame(DecodeError):
    """A zero length byte was found inside a frame.

    The sentinel may only ever appear as the trailing delimiter, so this
    means the stream is corrupted or misaligned.
    """

    pass


class UnexpectedEof(DecodeError):
    """Input ended too early.

    Raised when a block declares more literal bytes than remain in the
    frame, or when a source runs dry before a delimiter was seen.
    """

    pass


class TransportError(CobsError):
    """Failure reported by a sink or source."""

    pass
