"""Consistent Overhead Byte Stuffing (COBS) framing.

Turns arbitrary payloads into frames free of 0x00, so a single 0x00 can
mark the end of each frame on transports that cannot delimit messages on
their own (serial links, pipes, radio links).

Key pieces:
- encode / decode: pure transforms over in-memory buffers
- StreamingEncoder: writes frames to any Sink
- StreamingDecoder: reads frames from any Source
"""

from .codec import (
    DELIMITER,
    FULL_BLOCK,
    MAX_RUN,
    SENTINEL,
    DecoderState,
    EncoderState,
    decode,
    encode,
    max_encoded_length,
)
from .decoder import DecoderConfig, StreamingDecoder
from .encoder import StreamingEncoder, send_frame
from .errors import CobsError, DecodeError, MalformedFrame, TransportError, UnexpectedEof
from .statistics import FrameStatistics
from .transport import Sink, Source

__all__ = [
    # Transforms
    "encode",
    "decode",
    "max_encoded_length",
    "EncoderState",
    "DecoderState",
    "SENTINEL",
    "DELIMITER",
    "FULL_BLOCK",
    "MAX_RUN",
    # Streaming
    "StreamingEncoder",
    "StreamingDecoder",
    "DecoderConfig",
    "send_frame",
    "FrameStatistics",
    # Capabilities
    "Sink",
    "Source",
    # Errors
    "CobsError",
    "DecodeError",
    "MalformedFrame",
    "UnexpectedEof",
    "TransportError",
]
