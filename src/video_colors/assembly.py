"""
Result Assembly Module

This module is responsible for:
1. Ordering SampledColor values collected from all workers by frame index
2. Rejecting duplicate or out-of-range indices, which indicate a coordination bug
3. Projecting the ordered values into the final ColorTrack
"""

import logging
from typing import Iterable, Optional

from .errors import AssemblyInvariantError
from .models import ColorTrack, SampledColor


logger = logging.getLogger(__name__)


def assemble(pairs: Iterable[SampledColor], frame_count: Optional[int] = None) -> ColorTrack:
    """
    Build the ColorTrack from unordered worker results.

    Args:
        pairs: SampledColor values in any order
        frame_count: If given, every index must lie in [0, frame_count)

    Returns:
        Colors ordered by ascending source frame index

    Raises:
        AssemblyInvariantError: On a duplicate or out-of-range index
    """
    ordered = sorted(pairs, key=lambda p: p.index)

    previous = None
    for pair in ordered:
        if frame_count is not None and not 0 <= pair.index < frame_count:
            raise AssemblyInvariantError(
                f"Frame index outside [0, {frame_count})",
                frame_index=pair.index
            )
        if previous is not None and pair.index == previous:
            raise AssemblyInvariantError("Duplicate frame index", frame_index=pair.index)
        previous = pair.index

    colors = [pair.color for pair in ordered]
    logger.debug(f"Assembled {len(colors)} color(s)")
    return colors
