"""
Error types raised by the color extraction pipeline.

Every failure surfaces to the caller of ``extract_colors`` as one of these.
Nothing is retried; a run either returns a complete ColorTrack or raises.
"""

from typing import Optional

from .models import Chunk


class VideoColorsError(Exception):
    """Base class for all pipeline errors.

    Carries optional diagnostic context: the chunk being processed and the
    frame index at which the failure happened.
    """

    def __init__(
        self,
        message: str,
        chunk: Optional[Chunk] = None,
        frame_index: Optional[int] = None
    ):
        super().__init__(message)
        self.message = message
        self.chunk = chunk
        self.frame_index = frame_index

    def attach(self, chunk: Chunk, frame_index: Optional[int] = None) -> "VideoColorsError":
        """Record where the error happened, keeping context set closer to the source."""
        if self.chunk is None:
            self.chunk = chunk
        if self.frame_index is None:
            self.frame_index = frame_index
        return self

    def __str__(self) -> str:
        context = []
        if self.chunk is not None:
            context.append(f"chunk {self.chunk}")
        if self.frame_index is not None:
            context.append(f"frame {self.frame_index}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class ConfigError(VideoColorsError):
    """Invalid input or precondition, reported before any work starts"""


class DecodeError(VideoColorsError):
    """Video could not be opened, or a frame could not be grabbed or read"""


class SeekError(DecodeError):
    """Decoder could not be positioned at a chunk start"""


class ExtractionError(VideoColorsError):
    """Color computation failed on a decoded frame"""


class AssemblyInvariantError(VideoColorsError):
    """Duplicate or out-of-range frame index seen while assembling results"""
