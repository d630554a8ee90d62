"""In-memory sink and source."""

from __future__ import annotations


class BufferSink:
    """Sink that collects everything written to it."""

    def __init__(self) -> None:
        self._buffer = bytearray()
        self.chunks: list[bytes] = []

    def write(self, data: bytes) -> None:
        self.chunks.append(bytes(data))
        self._buffer += data

    @property
    def data(self) -> bytes:
        return bytes(self._buffer)

    def clear(self) -> None:
        self._buffer.clear()
        self.chunks.clear()


class BufferSource:
    """Source that serves a fixed byte string.

    Args:
        data: Bytes to hand out
        max_chunk: Cap on bytes returned per read, to simulate a transport
            that delivers data in short pieces
    """

    def __init__(self, data: bytes = b"", max_chunk: int | None = None) -> None:
        if max_chunk is not None and max_chunk < 1:
            raise ValueError("max_chunk must be at least 1")
        self._data = bytes(data)
        self._offset = 0
        self._max_chunk = max_chunk

    def read(self, size: int) -> bytes:
        if self._max_chunk is not None:
            size = min(size, self._max_chunk)
        start = self._offset
        self._offset = min(start + size, len(self._data))
        return self._data[start : self._offset]

    def feed(self, data: bytes) -> None:
        """Append more bytes to be served."""
        self._data += data

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset
