"""
Per-chunk worker.

A worker opens its own decoder, seeks it to the start of its chunk and walks
the chunk frame by frame in ascending order. Sampled frames are fully decoded
and reduced to a color; every other frame is only grabbed to advance the
cursor.
"""

import logging
from typing import List

from .color_extraction import ColorExtractor
from .decoder import DecoderFactory
from .errors import DecodeError, ExtractionError, VideoColorsError
from .models import Chunk, SampledColor
from .sampling import is_sampled


logger = logging.getLogger(__name__)


def run_chunk(
    chunk: Chunk,
    fps: int,
    decoder_factory: DecoderFactory,
    extractor: ColorExtractor
) -> List[SampledColor]:
    """
    Extract the colors of every sampled frame in a chunk.

    Args:
        chunk: Frame range to process
        fps: Integer frame rate used by the sampling policy
        decoder_factory: Opens a new decoder owned by this call only
        extractor: Color extraction strategy

    Returns:
        SampledColor list in ascending frame order

    Raises:
        DecodeError: If the decoder cannot be opened, seeked, or advanced
        ExtractionError: If a color cannot be computed
        Both carry the chunk range and, where known, the frame index.
    """
    logger.debug(f"Starting chunk {chunk}")

    colors: List[SampledColor] = []
    index = None

    try:
        with decoder_factory() as decoder:
            decoder.seek(chunk.start)

            for index in chunk.indices():
                if not is_sampled(index, fps):
                    decoder.skip()
                    continue

                frame = decoder.read()
                try:
                    color = extractor.extract(frame)
                except VideoColorsError:
                    raise
                except Exception as e:
                    raise ExtractionError(f"Color extraction failed: {e}") from e

                logger.debug(f"frame {index}: {color}")
                colors.append(SampledColor(index=index, color=color))

    except (DecodeError, ExtractionError) as e:
        raise e.attach(chunk, index)

    logger.debug(f"Finished chunk {chunk}: {len(colors)} sampled frame(s)")
    return colors


class ChunkWorker:
    """
    Picklable callable binding everything but the chunk.

    Executors receive one of these and call it once per chunk; each call opens
    a private decoder through ``decoder_factory``.
    """

    def __init__(self, fps: int, decoder_factory: DecoderFactory, extractor: ColorExtractor):
        self.fps = fps
        self.decoder_factory = decoder_factory
        self.extractor = extractor

    def __call__(self, chunk: Chunk) -> List[SampledColor]:
        return run_chunk(chunk, self.fps, self.decoder_factory, self.extractor)
