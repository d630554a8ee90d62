"""Running byte counters for encoders and decoders."""

from __future__ import annotations

from pydantic import BaseModel


class FrameStatistics(BaseModel):
    """Cumulative payload and wire byte counts.

    ``raw`` counts payload bytes, ``encoded`` counts bytes on the wire
    including each frame's delimiter.
    """

    frames: int = 0
    raw: int = 0
    encoded: int = 0

    def update(self, raw: int, encoded: int) -> None:
        self.frames += 1
        self.raw += raw
        self.encoded += encoded

    def get(self) -> tuple[int, int]:
        return self.raw, self.encoded

    @property
    def overhead(self) -> int:
        """Bytes added by framing so far."""
        return self.encoded - self.raw

    def reset(self) -> None:
        self.frames = 0
        self.raw = 0
        self.encoded = 0
