"""Unit tests for StreamingEncoder."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from cobs_framing.codec import encode
from cobs_framing.encoder import StreamingEncoder, send_frame
from cobs_framing.errors import TransportError
from cobs_framing.transport import BufferSink

# =============================================================================
# Framing
# =============================================================================


class TestFraming:
    """Frames on the wire are the encoded payload plus one delimiter."""

    def test_empty_payload(self, sink: BufferSink) -> None:
        """An empty frame is an empty block and the delimiter."""
        encoder = StreamingEncoder(sink)
        assert encoder.finish() == 2
        assert sink.data == b"\x01\x00"

    def test_single_zero(self, sink: BufferSink) -> None:
        """A lone zero payload."""
        StreamingEncoder(sink).send(b"\x00")
        assert sink.data == b"\x01\x01\x00"

    def test_mixed_payload(self, sink: BufferSink) -> None:
        """11 22 00 33 -> 03 11 22 02 33 00."""
        total = StreamingEncoder(sink).send(b"\x11\x22\x00\x33")
        assert sink.data == b"\x03\x11\x22\x02\x33\x00"
        assert total == 6

    def test_full_block_frame(self, sink: BufferSink, ascending_254: bytes) -> None:
        """A single full block goes straight to the delimiter."""
        StreamingEncoder(sink).send(ascending_254)
        assert sink.data == b"\xff" + ascending_254 + b"\x00"

    def test_consecutive_frames(self, sink: BufferSink) -> None:
        """The encoder is ready for the next frame after finish."""
        encoder = StreamingEncoder(sink)
        encoder.send(b"\x11")
        encoder.send(b"\x22")
        assert sink.data == b"\x02\x11\x00\x02\x22\x00"

    def test_send_frame_helper(self, sink: BufferSink) -> None:
        """send_frame is a one-shot encoder."""
        assert send_frame(sink, b"\x11\x22\x33\x44") == 6
        assert sink.data == b"\x05\x11\x22\x33\x44\x00"


# =============================================================================
# Incremental writes
# =============================================================================


class TestIncrementalWrites:
    """Chunked writes are indistinguishable from one big write."""

    @pytest.mark.parametrize("chunk", [1, 2, 7, 254, 1000])
    def test_chunking_does_not_change_output(self, sink: BufferSink, chunk: int) -> None:
        """Same bytes whatever the write size."""
        payload = bytes((i * 31) % 256 for i in range(900))
        encoder = StreamingEncoder(sink)
        for i in range(0, len(payload), chunk):
            encoder.write(payload[i : i + chunk])
        encoder.finish()
        assert sink.data == encode(payload) + b"\x00"

    def test_no_partial_block_reaches_sink(self, sink: BufferSink) -> None:
        """Only completed blocks are emitted before finish."""
        encoder = StreamingEncoder(sink)
        encoder.write(b"\x11\x22")
        assert sink.data == b""

        encoder.write(b"\x00\x33")
        assert sink.data == b"\x03\x11\x22"

        encoder.finish()
        assert sink.data == b"\x03\x11\x22\x02\x33\x00"

    def test_full_block_emitted_as_soon_as_complete(
        self, sink: BufferSink, ascending_254: bytes
    ) -> None:
        """254 non-zero bytes close a block without waiting for more input."""
        encoder = StreamingEncoder(sink)
        encoder.write(ascending_254)
        assert sink.data == b"\xff" + ascending_254
        assert b"\x00" not in sink.data

    def test_delimiter_only_written_by_finish(self, sink: BufferSink) -> None:
        """write never produces a zero byte."""
        encoder = StreamingEncoder(sink)
        encoder.write(b"\x00" * 20)
        assert 0 not in sink.data
        encoder.finish()
        assert sink.data.count(0) == 1
        assert sink.data.endswith(b"\x00")


# =============================================================================
# Statistics
# =============================================================================


class TestStatistics:
    """Counters follow payload and wire sizes."""

    def test_stats_after_one_frame(self, sink: BufferSink) -> None:
        """Raw is payload size, encoded includes the delimiter."""
        encoder = StreamingEncoder(sink)
        encoder.send(b"\x00")
        assert encoder.stats.get() == (1, 3)
        assert encoder.stats.frames == 1

    def test_stats_accumulate(self, sink: BufferSink) -> None:
        """Counters are cumulative across frames."""
        encoder = StreamingEncoder(sink)
        encoder.send(b"\x00\x00")
        encoder.send(b"\x11\x22\x33\x44")
        assert encoder.stats.get() == (6, 4 + 6)
        assert encoder.stats.overhead == 4
        assert encoder.stats.encoded == len(sink.data)


# =============================================================================
# Sink failures
# =============================================================================


class TestSinkFailures:
    """Transport errors surface unchanged in meaning."""

    def test_sink_error_wrapped(self) -> None:
        """Arbitrary sink exceptions become TransportError."""
        failing = MagicMock()
        failing.write.side_effect = OSError("port closed")
        encoder = StreamingEncoder(failing)

        with pytest.raises(TransportError) as exc_info:
            encoder.send(b"\x11")
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_transport_error_passes_through(self) -> None:
        """TransportError from the sink is not double wrapped."""
        original = TransportError("link down")
        failing = MagicMock()
        failing.write.side_effect = original
        encoder = StreamingEncoder(failing)

        with pytest.raises(TransportError) as exc_info:
            encoder.finish()
        assert exc_info.value is original

    def test_partial_writes_not_rolled_back(self, ascending_254: bytes) -> None:
        """Blocks accepted before the failure stay written."""
        sink = BufferSink()
        calls = {"n": 0}
        real_write = sink.write

        def flaky_write(data: bytes) -> None:
            calls["n"] += 1
            if calls["n"] > 1:
                raise OSError("timeout")
            real_write(data)

        failing = MagicMock()
        failing.write.side_effect = flaky_write
        encoder = StreamingEncoder(failing)

        encoder.write(ascending_254)
        with pytest.raises(TransportError):
            encoder.finish()
        assert sink.data == b"\xff" + ascending_254
        assert encoder.stats.frames == 0

    def test_reset_after_failure(self, sink: BufferSink) -> None:
        """After reset the encoder produces clean frames again."""
        encoder = StreamingEncoder(failing_then(sink, OSError("busy")))

        with pytest.raises(TransportError):
            encoder.write(b"\x11\x00")
        encoder.reset()

        encoder.send(b"\x22")
        assert sink.data == b"\x02\x22\x00"

    def test_failed_finish_not_counted_in_next_frame(self, sink: BufferSink) -> None:
        """Counters start from zero after a failed finish, even without reset."""
        encoder = StreamingEncoder(failing_then(sink, OSError("timeout")))

        encoder.write(b"\x11\x22\x33")
        with pytest.raises(TransportError):
            encoder.finish()

        assert encoder.send(b"\x44") == 3
        assert sink.data == b"\x02\x44\x00"
        assert encoder.stats.get() == (1, 3)
        assert encoder.stats.frames == 1


def failing_then(sink: BufferSink, *errors: Exception) -> MagicMock:
    """Sink that raises ``errors`` in turn, then writes through to ``sink``."""
    pending = list(errors)

    def write(data: bytes) -> None:
        if pending:
            raise pending.pop(0)
        sink.write(data)

    failing = MagicMock()
    failing.write.side_effect = write
    return failing
