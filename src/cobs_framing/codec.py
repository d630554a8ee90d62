"""COBS encode/decode transforms.

Wire format: [block]* [0x00 delimiter]

A block is one length byte ``L`` (1..255) followed by ``L - 1`` literal
bytes, none of which is zero. ``L == 255`` is a full block: 254 literal
bytes with no sentinel after them in the payload. Any shorter block stands
for its literal bytes followed by a sentinel, unless it is the last block
of the frame.

The transforms here never touch I/O and never include the delimiter.
Both are built on small state objects that the streaming encoder and
decoder also own, so a frame fed in pieces produces exactly the same bytes
as a frame processed in one call.
"""

from __future__ import annotations

from collections.abc import Iterable

from .errors import MalformedFrame, UnexpectedEof

SENTINEL = 0x00
FULL_BLOCK = 0xFF
MAX_RUN = FULL_BLOCK - 1  # literal bytes carried by a full block

DELIMITER = bytes([SENTINEL])


def max_encoded_length(payload_length: int) -> int:
    """Upper bound on ``len(encode(payload))`` for a payload of this length."""
    if payload_length < 0:
        raise ValueError("payload_length must be non-negative")
    return payload_length + -(-payload_length // MAX_RUN) + 1


class EncoderState:
    """Scan state for one frame being encoded.

    Holds the bytes of the current run (everything since the last
    sentinel or full-block boundary) until their length byte is known.
    """

    __slots__ = ("run", "pending", "after_full_block")

    def __init__(self) -> None:
        self.run = 0
        self.pending = bytearray()
        # True when the last boundary was length-driven and nothing followed.
        self.after_full_block = False

    def reset(self) -> None:
        self.run = 0
        self.pending.clear()
        self.after_full_block = False

    def _emit(self, out: bytearray, code: int) -> None:
        out.append(code)
        out += self.pending
        self.run = 0
        self.pending.clear()

    def feed(self, data: Iterable[int]) -> bytes:
        """Consume payload bytes, returning every block completed by them."""
        out = bytearray()
        for byte in data:
            if byte == SENTINEL:
                self._emit(out, self.run + 1)
                self.after_full_block = False
                continue

            self.pending.append(byte)
            self.run += 1
            self.after_full_block = False
            if self.run == MAX_RUN:
                self._emit(out, FULL_BLOCK)
                self.after_full_block = True
        return bytes(out)

    def flush(self) -> bytes:
        """Close the frame, returning the final block and resetting state.

        A payload that ended exactly on a full block needs no trailing
        empty block: the delimiter alone terminates it.
        """
        out = bytearray()
        if not self.after_full_block:
            self._emit(out, self.run + 1)
        self.reset()
        return bytes(out)


class DecoderState:
    """Scan state for one frame being decoded.

    ``remaining`` counts the literal bytes still owed by the current block.
    ``pending_sentinel`` records that the previous block was short, so a
    zero belongs in the output - but only once another length byte proves
    that block was not the last one in the frame.
    """

    __slots__ = ("remaining", "pending_sentinel", "consumed")

    def __init__(self) -> None:
        self.remaining = 0
        self.pending_sentinel = False
        self.consumed = 0

    def reset(self) -> None:
        self.remaining = 0
        self.pending_sentinel = False
        self.consumed = 0

    def feed(self, data: bytes | bytearray | memoryview) -> bytes:
        """Consume encoded bytes (no delimiter), returning decoded output.

        Raises:
            MalformedFrame: a zero byte appeared where a length byte was due.
        """
        view = memoryview(data)
        out = bytearray()
        index = 0
        size = len(view)

        while index < size:
            if self.remaining:
                take = min(self.remaining, size - index)
                out += view[index : index + take]
                self.remaining -= take
                index += take
                continue

            code = view[index]
            if code == SENTINEL:
                raise MalformedFrame(
                    f"zero length byte at offset {self.consumed + index}",
                    offset=self.consumed + index,
                )
            if self.pending_sentinel:
                out.append(SENTINEL)
            self.remaining = code - 1
            self.pending_sentinel = code < FULL_BLOCK
            index += 1

        self.consumed += size
        return bytes(out)

    def finish(self) -> None:
        """Check the frame ended on a block boundary and reset state.

        The pending sentinel of the last block is dropped: the frame
        delimiter supplies that boundary.

        Raises:
            UnexpectedEof: the last block declared more bytes than arrived.
        """
        missing = self.remaining
        offset = self.consumed
        self.reset()
        if missing:
            raise UnexpectedEof(
                f"frame truncated: block needs {missing} more byte(s) at offset {offset}",
                offset=offset,
            )


def encode(payload: bytes | bytearray | memoryview) -> bytes:
    """COBS-encode a payload. Does NOT append the 0x00 delimiter."""
    state = EncoderState()
    return state.feed(bytes(payload)) + state.flush()


def decode(frame: bytes | bytearray | memoryview) -> bytes:
    """COBS-decode one frame. Input must NOT include the 0x00 delimiter.

    Raises:
        MalformedFrame: a zero byte appears in the frame.
        UnexpectedEof: a block is cut short by the end of the frame.
    """
    state = DecoderState()
    decoded = state.feed(frame)
    state.finish()
    return decoded
