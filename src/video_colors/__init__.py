"""
Per-second color signatures of video files.
"""

from .errors import (
    AssemblyInvariantError,
    ConfigError,
    DecodeError,
    ExtractionError,
    SeekError,
    VideoColorsError,
)
from .models import Chunk, ColorTrack, RGB, SampledColor, VideoStats
from .pipeline import ColorExtractionPipeline, ExtractionConfig, extract_colors

__version__ = "0.1.0"
