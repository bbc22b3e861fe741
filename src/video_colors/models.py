"""
Shared data models for the color extraction pipeline.

This module contains dataclasses and shared types used across
multiple modules to avoid circular imports and unnecessary dependencies.
"""

from dataclasses import dataclass
from typing import List, Tuple


# One 8-bit-per-channel color, always in (R, G, B) order
RGB = Tuple[int, int, int]

# Final ordered output of a run: one color per sampled second
ColorTrack = List[RGB]


@dataclass(frozen=True)
class VideoStats:
    """Frame rate and frame count snapshot, read once per run"""
    fps: int
    frame_count: int


@dataclass(frozen=True)
class Chunk:
    """Contiguous range of frame indices [start, end) owned by one worker"""
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def indices(self) -> range:
        return range(self.start, self.end)

    def __str__(self) -> str:
        return f"[{self.start}, {self.end})"


@dataclass(frozen=True)
class SampledColor:
    """Color of a sampled frame, tagged with its source frame index"""
    index: int
    color: RGB
