"""
Chunk planning for parallel extraction.

Splits the frame range of a video into contiguous, non-overlapping chunks,
one per worker. Each chunk pays for opening and seeking its own decoder, so
chunks are never made shorter than MIN_CHUNK_SECONDS of footage unless the
video itself is shorter.
"""

import logging
from typing import List

from .errors import ConfigError
from .models import Chunk
from .sampling import check_fps


logger = logging.getLogger(__name__)

MIN_CHUNK_SECONDS = 90


def _ceil_div(a: int, b: int) -> int:
    return -(-a // b)


def plan_chunks(frame_count: int, fps: int, max_workers: int) -> List[Chunk]:
    """
    Partition [0, frame_count) into chunks for the workers.

    Args:
        frame_count: Total number of frames in the video
        fps: Integer frame rate
        max_workers: Upper bound on the number of chunks (>= 1)

    Returns:
        Chunks in ascending order covering every frame exactly once.
        An empty video yields no chunks.
    """
    check_fps(fps)
    if frame_count < 0:
        raise ConfigError(f"Frame count must not be negative, got {frame_count}")
    if max_workers < 1:
        raise ConfigError(f"Worker count must be at least 1, got {max_workers}")

    if frame_count == 0:
        return []

    if fps >= frame_count:
        chunks = [Chunk(0, frame_count)]
        logger.debug(f"Planned single chunk for short video: {chunks[0]}")
        return chunks

    min_chunk_size = fps * MIN_CHUNK_SECONDS
    desired_chunks = _ceil_div(frame_count, min_chunk_size)
    chunk_count = min(max_workers, desired_chunks)
    chunk_size = _ceil_div(frame_count, chunk_count)

    chunks = [
        Chunk(start, min(start + chunk_size, frame_count))
        for start in range(0, frame_count, chunk_size)
    ]

    logger.debug(
        f"Planned {len(chunks)} chunk(s) of up to {chunk_size} frames "
        f"(min_chunk_size={min_chunk_size}, max_workers={max_workers}): "
        f"{', '.join(str(c) for c in chunks)}"
    )
    return chunks
