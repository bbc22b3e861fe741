"""
Color Extraction Pipeline

Orchestrates one extraction run:
1. Read VideoStats once from a short-lived decoder
2. Plan chunks for the configured worker count
3. Run one worker per chunk through the selected executor, each worker
   opening its own decoder
4. Assemble the ordered ColorTrack

The run either returns a complete ColorTrack or raises; there is no partial
result.
"""

import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional

from .assembly import assemble
from .chunking import plan_chunks
from .color_extraction import ColorExtractor, get_extractor
from .decoder import Decoder, OpenCVDecoder
from .errors import ConfigError
from .executors import default_worker_count, get_executor
from .models import ColorTrack, VideoStats
from .sampling import check_fps
from .worker import ChunkWorker


logger = logging.getLogger(__name__)


@dataclass
class ExtractionConfig:
    """Settings for one extraction run"""
    max_workers: Optional[int] = None  # None = available parallelism - 1
    executor: str = 'pool'  # 'pool' or 'fork-join'
    color_mode: str = 'mean'  # 'mean' or 'dominant'
    show_progress: bool = False
    processes: bool = False  # fork-join only: run chunks in worker processes

    def resolved_workers(self) -> int:
        if self.max_workers is None:
            return default_worker_count()
        if self.max_workers < 1:
            raise ConfigError(f"Worker count must be at least 1, got {self.max_workers}")
        return self.max_workers


def validate_stats(stats: VideoStats):
    """Raise ConfigError if the stats cannot drive a run"""
    check_fps(stats.fps)
    if stats.frame_count < 0:
        raise ConfigError(f"Frame count must not be negative, got {stats.frame_count}")


class ColorExtractionPipeline:
    """Extracts one color per second of footage from a video file"""

    def __init__(
        self,
        config: Optional[ExtractionConfig] = None,
        decoder_factory: Callable[[str], Decoder] = OpenCVDecoder,
        extractor: Optional[ColorExtractor] = None
    ):
        """
        Initialize the pipeline.

        Args:
            config: Run settings (defaults to ExtractionConfig())
            decoder_factory: Opens a decoder for a path; called once for stats
                and once per chunk
            extractor: Color strategy (default: built from config.color_mode)
        """
        self.config = config or ExtractionConfig()
        self.max_workers = self.config.resolved_workers()
        self.decoder_factory = decoder_factory
        self.extractor = extractor or get_extractor(self.config.color_mode)
        self.executor = get_executor(
            self.config.executor,
            max_workers=self.max_workers,
            show_progress=self.config.show_progress,
            processes=self.config.processes
        )

    def run(self, video_path: str) -> ColorTrack:
        """
        Extract the ColorTrack of a video.

        Args:
            video_path: Path to the video file

        Returns:
            One color per sampled second, in chronological order
        """
        with self.decoder_factory(video_path) as decoder:
            stats = decoder.stats()

        logger.debug(f"fps={stats.fps}, frame_count={stats.frame_count}")
        validate_stats(stats)

        chunks = plan_chunks(stats.frame_count, stats.fps, self.max_workers)
        if not chunks:
            logger.info(f"No frames in {video_path}, nothing to extract")
            return []

        worker = ChunkWorker(
            fps=stats.fps,
            decoder_factory=partial(self.decoder_factory, video_path),
            extractor=self.extractor
        )
        pairs = self.executor.execute(chunks, worker)

        return assemble(pairs, frame_count=stats.frame_count)


def extract_colors(video_path: str, config: Optional[ExtractionConfig] = None) -> ColorTrack:
    """
    Extract one color per second of footage from a video.

    Args:
        video_path: Path to the video file
        config: Run settings (defaults to ExtractionConfig())

    Returns:
        ColorTrack ordered by source frame index
    """
    return ColorExtractionPipeline(config).run(video_path)
