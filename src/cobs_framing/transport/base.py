"""Transport capability interfaces.

The encoder and decoder never know what they are talking to. Anything
that can accept a chunk of bytes is a Sink; anything that can hand back
the next chunk of bytes is a Source. Implementations:
- BufferSink / BufferSource: in-memory, for tests and loopback
- StreamSink / StreamSource: binary file objects (pipes, files, stdio)

Serial ports, sockets and radios plug in the same way without
subclassing anything.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Sink(Protocol):
    """Capability for transmitting encoded bytes."""

    def write(self, data: bytes) -> None:
        """Transmit the whole chunk or raise on failure."""
        ...


@runtime_checkable
class Source(Protocol):
    """Capability for receiving raw bytes."""

    def read(self, size: int) -> bytes:
        """Return up to ``size`` bytes.

        A short read is fine. An empty result signals end of input.
        Failures are raised.
        """
        ...
