"""
Video Decoder Module

This module is responsible for:
1. Defining the decoder contract the pipeline relies on
2. Wrapping OpenCV's VideoCapture behind that contract
3. Reading frame rate and frame count once per video

A decoder is a sequential cursor: it can be seeked to an absolute frame,
then advanced one frame at a time either cheaply (skip, no pixel data) or
with a full decode (read). A decoder instance must never be shared between
concurrent workers; every worker opens its own.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable

import cv2
import numpy as np

from .errors import DecodeError, SeekError
from .models import VideoStats
from .sampling import normalize_fps


logger = logging.getLogger(__name__)


class Decoder(ABC):
    """Sequential-access video cursor"""

    @abstractmethod
    def stats(self) -> VideoStats:
        """Frame rate (truncated to an integer) and total frame count"""

    @abstractmethod
    def seek(self, index: int):
        """Position the cursor so the next skip/read yields frame ``index``"""

    @abstractmethod
    def skip(self):
        """Advance one frame without materializing it"""

    @abstractmethod
    def read(self) -> np.ndarray:
        """Advance one frame and return it as a BGR uint8 array (H, W, 3)"""

    def release(self):
        """Free the underlying resources"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False


# Callable opening a fresh, private decoder for one worker
DecoderFactory = Callable[[], Decoder]


class OpenCVDecoder(Decoder):
    """
    Decoder backed by ``cv2.VideoCapture``.

    ``skip`` maps to ``grab()`` and ``read`` to ``read()``, so non-sampled
    frames are never converted to pixel arrays.
    """

    def __init__(self, video_path: str):
        """
        Open a video file.

        Args:
            video_path: Path to the video file

        Raises:
            DecodeError: If the file cannot be opened
        """
        self.video_path = str(video_path)
        self.cap = cv2.VideoCapture(self.video_path)

        if not self.cap.isOpened():
            raise DecodeError(f"Cannot open video: {self.video_path}")

    def stats(self) -> VideoStats:
        fps = normalize_fps(self.cap.get(cv2.CAP_PROP_FPS))
        frame_count = int(self.cap.get(cv2.CAP_PROP_FRAME_COUNT))
        return VideoStats(fps=fps, frame_count=frame_count)

    def seek(self, index: int):
        if not self.cap.set(cv2.CAP_PROP_POS_FRAMES, index):
            raise SeekError(f"Cannot seek {self.video_path} to frame {index}", frame_index=index)

    def skip(self):
        if not self.cap.grab():
            raise DecodeError(f"Cannot grab frame from {self.video_path}")

    def read(self) -> np.ndarray:
        ret, frame = self.cap.read()
        if not ret or frame is None:
            raise DecodeError(f"Cannot read frame from {self.video_path}")
        return frame

    def release(self):
        self.cap.release()


def read_video_stats(video_path: str) -> VideoStats:
    """
    Open a video just long enough to read its stats.

    Args:
        video_path: Path to the video file

    Returns:
        VideoStats snapshot for the file
    """
    with OpenCVDecoder(video_path) as decoder:
        stats = decoder.stats()

    logger.debug(f"{video_path}: fps={stats.fps}, frame_count={stats.frame_count}")
    return stats
