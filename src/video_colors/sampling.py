"""
Sampling policy: which frames get their color extracted.

The first frame of every one-second window is sampled, assuming a constant
frame rate. Frame rates are truncated to integers before use, so fractional
rates such as 29.97 drift slightly off true second boundaries.
"""

from typing import List

from .errors import ConfigError


def normalize_fps(raw_fps: float) -> int:
    """
    Convert a decoder-reported frame rate to the integer used for sampling.

    Args:
        raw_fps: Frame rate as reported by the decoder (may be fractional)

    Returns:
        Frame rate truncated toward zero
    """
    return int(raw_fps)


def check_fps(fps: int):
    """Raise ConfigError unless fps is a positive integer"""
    if fps <= 0:
        raise ConfigError(f"Frame rate must be a positive integer, got {fps}")


def is_sampled(index: int, fps: int) -> bool:
    """True if the frame at ``index`` opens a one-second window"""
    return index % fps == 0


def sampled_indices(frame_count: int, fps: int) -> List[int]:
    """
    List every sampled frame index of a video.

    Args:
        frame_count: Total number of frames
        fps: Integer frame rate

    Returns:
        Ascending list of sampled indices, e.g. [0, 30, 60, 90] for 95 frames at 30 fps
    """
    check_fps(fps)
    return list(range(0, max(frame_count, 0), fps))
