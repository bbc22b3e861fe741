"""
Shared fixtures and fakes for color extraction tests.

FakeDecoder serves synthetic uniform frames whose color encodes the frame
index, so the expected color of every sampled frame is known exactly.
"""

import threading
import time
from typing import Dict, List, Optional

import numpy as np
import pytest

from video_colors.color_extraction import MeanColorExtractor
from video_colors.decoder import Decoder
from video_colors.errors import DecodeError, SeekError
from video_colors.models import VideoStats


def color_for_index(index: int):
    """RGB color that FakeDecoder paints frame ``index`` with"""
    return (index % 256, (index // 256) % 256, 200)


class FakeDecoder(Decoder):
    """In-memory sequential decoder with call recording and failure injection"""

    def __init__(
        self,
        path: str,
        fps: float = 30,
        frame_count: int = 95,
        fail_read_at: Optional[int] = None,
        fail_skip_at: Optional[int] = None,
        fail_seek_to: Optional[int] = None,
        delays: Optional[Dict[int, float]] = None,
        registry: Optional["DecoderRegistry"] = None
    ):
        self.path = path
        self.fps = fps
        self.frame_count = frame_count
        self.fail_read_at = fail_read_at
        self.fail_skip_at = fail_skip_at
        self.fail_seek_to = fail_seek_to
        self.delays = delays or {}
        self.position = 0
        self.seeks: List[int] = []
        self.reads: List[int] = []
        self.skips: List[int] = []
        self.threads = set()
        self.released = False
        if registry is not None:
            registry.add(self)

    def _touch(self):
        self.threads.add(threading.get_ident())

    def stats(self) -> VideoStats:
        self._touch()
        return VideoStats(fps=int(self.fps), frame_count=self.frame_count)

    def seek(self, index: int):
        self._touch()
        if index == self.fail_seek_to:
            raise SeekError(f"Injected seek failure at {index}", frame_index=index)
        self.seeks.append(index)
        self.position = index
        delay = self.delays.get(index)
        if delay:
            time.sleep(delay)

    def skip(self):
        self._touch()
        if self.position >= self.frame_count or self.position == self.fail_skip_at:
            raise DecodeError("Injected grab failure", frame_index=self.position)
        self.skips.append(self.position)
        self.position += 1

    def read(self) -> np.ndarray:
        self._touch()
        if self.position >= self.frame_count or self.position == self.fail_read_at:
            raise DecodeError("Injected read failure", frame_index=self.position)
        self.reads.append(self.position)
        r, g, b = color_for_index(self.position)
        self.position += 1
        frame = np.empty((4, 4, 3), dtype=np.uint8)
        frame[:, :] = (b, g, r)
        return frame

    def release(self):
        self.released = True


class DecoderRegistry:
    """Factory producing FakeDecoders and remembering every instance"""

    def __init__(self, **decoder_kwargs):
        self.decoder_kwargs = decoder_kwargs
        self.instances: List[FakeDecoder] = []
        self._lock = threading.Lock()

    def add(self, decoder: FakeDecoder):
        with self._lock:
            self.instances.append(decoder)

    def __call__(self, path: str) -> FakeDecoder:
        return FakeDecoder(path, registry=self, **self.decoder_kwargs)

    def for_path(self, path: str = "fake.mp4"):
        """Zero-argument factory, as handed to a single worker"""
        return lambda: self(path)

    @property
    def worker_decoders(self) -> List[FakeDecoder]:
        """Decoders that were seeked, i.e. used by a worker rather than for stats"""
        return [d for d in self.instances if d.seeks]


class RaisingExtractor(MeanColorExtractor):
    """Mean extractor that blows up on one frame color"""

    def __init__(self, bad_index: int):
        self.bad_color = color_for_index(bad_index)

    def extract(self, frame):
        color = super().extract(frame)
        if color == self.bad_color:
            raise ValueError("boom")
        return color


@pytest.fixture
def registry():
    """Decoder factory for a 95-frame, 30 fps video"""
    return DecoderRegistry(fps=30, frame_count=95)


@pytest.fixture
def long_registry():
    """Decoder factory for a 1000-frame, 2 fps video (several chunks)"""
    return DecoderRegistry(fps=2, frame_count=1000)


@pytest.fixture
def shuffled_registry():
    """Long video whose later chunks finish first"""
    delays = {start: 0.05 - start / 25000 for start in range(0, 1000, 10)}
    return DecoderRegistry(fps=2, frame_count=1000, delays=delays)


@pytest.fixture
def extractor():
    return MeanColorExtractor()
