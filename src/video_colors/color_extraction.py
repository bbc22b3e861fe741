"""
Frame Color Extraction Module

This module is responsible for:
1. Converting decoded BGR frames to RGB
2. Reducing a frame to a single representative color, either
   - the mean color of all pixels, or
   - the dominant color: centroid of the largest k-means cluster (FAISS)

Channel values are truncated to 8-bit integers.
"""

import logging
from abc import ABC, abstractmethod

import cv2
import numpy as np

from .errors import ConfigError, ExtractionError
from .models import RGB

try:
    import faiss
except ImportError:
    faiss = None


logger = logging.getLogger(__name__)

COLOR_MODES = ('mean', 'dominant')


def _to_rgb(frame: np.ndarray) -> np.ndarray:
    """Convert an OpenCV BGR frame to RGB"""
    if frame is None or frame.ndim != 3 or frame.shape[2] != 3 or frame.size == 0:
        shape = None if frame is None else frame.shape
        raise ExtractionError(f"Expected a non-empty (H, W, 3) frame, got shape {shape}")
    try:
        return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
    except cv2.error as e:
        raise ExtractionError(f"BGR to RGB conversion failed: {e}") from e


def _to_rgb8(values) -> RGB:
    clipped = np.clip(np.asarray(values, dtype=np.float64)[:3], 0, 255)
    r, g, b = (int(v) for v in clipped)
    return (r, g, b)


class ColorExtractor(ABC):
    """Strategy reducing one decoded frame to one RGB color"""

    @abstractmethod
    def extract(self, frame: np.ndarray) -> RGB:
        """
        Compute the representative color of a frame.

        Args:
            frame: BGR uint8 array of shape (H, W, 3)

        Returns:
            (r, g, b) tuple of ints in 0..255

        Raises:
            ExtractionError: If the color cannot be computed
        """


class MeanColorExtractor(ColorExtractor):
    """Average color over all pixels"""

    def extract(self, frame: np.ndarray) -> RGB:
        rgb_frame = _to_rgb(frame)
        mean = cv2.mean(rgb_frame)
        return _to_rgb8(mean)


class DominantColorExtractor(ColorExtractor):
    """
    Dominant color via k-means clustering of pixel values.

    Pixels are clustered with FAISS k-means; the centroid of the cluster
    holding the most pixels is returned.
    """

    def __init__(self, k: int = 10, niter: int = 10, nredo: int = 1, seed: int = 1234):
        """
        Initialize the extractor.

        Args:
            k: Number of clusters
            niter: K-means iterations
            nredo: Number of k-means restarts
            seed: Random seed, fixed so repeated runs produce identical colors
        """
        if faiss is None:
            raise ImportError("FAISS not installed. Run: pip install faiss-cpu")
        if k < 1:
            raise ConfigError(f"Cluster count must be at least 1, got {k}")

        self.k = k
        self.niter = niter
        self.nredo = nredo
        self.seed = seed

    def extract(self, frame: np.ndarray) -> RGB:
        rgb_frame = _to_rgb(frame)
        pixels = np.ascontiguousarray(rgb_frame.reshape(-1, 3), dtype=np.float32)

        # FAISS needs at least one training point per centroid
        k = min(self.k, len(pixels))

        try:
            kmeans = faiss.Kmeans(
                3, k,
                niter=self.niter,
                nredo=self.nredo,
                seed=self.seed,
                verbose=False
            )
            kmeans.train(pixels)
            _, labels = kmeans.index.search(pixels, 1)
        except RuntimeError as e:
            raise ExtractionError(f"K-means clustering failed: {e}") from e

        counts = np.bincount(labels.ravel(), minlength=k)
        dominant = kmeans.centroids[int(np.argmax(counts))]
        return _to_rgb8(dominant)


def get_extractor(mode: str) -> ColorExtractor:
    """
    Build the color extractor for a mode name.

    Args:
        mode: 'mean' or 'dominant'

    Returns:
        ColorExtractor instance
    """
    if mode == 'mean':
        return MeanColorExtractor()
    if mode == 'dominant':
        return DominantColorExtractor()
    raise ConfigError(f"Unknown color mode '{mode}', expected one of {', '.join(COLOR_MODES)}")
