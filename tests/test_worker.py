"""
Tests for the per-chunk worker
"""
import pytest

from conftest import DecoderRegistry, RaisingExtractor, color_for_index
from video_colors.errors import DecodeError, ExtractionError, SeekError
from video_colors.models import Chunk, SampledColor
from video_colors.worker import ChunkWorker, run_chunk


class TestRunChunk:
    """Test sequential walking of a chunk with a private decoder"""

    def test_emits_only_sampled_frames(self, registry, extractor):
        """Test the 95-frame, 30 fps video yields indices 0, 30, 60, 90"""
        result = run_chunk(Chunk(0, 95), 30, registry.for_path(), extractor)

        assert [p.index for p in result] == [0, 30, 60, 90]
        assert result[1] == SampledColor(index=30, color=color_for_index(30))

    def test_reads_sampled_frames_and_skips_the_rest(self, registry, extractor):
        """Test only sampled frames pay for a full decode"""
        run_chunk(Chunk(0, 95), 30, registry.for_path(), extractor)

        decoder = registry.instances[0]
        assert decoder.seeks == [0]
        assert decoder.reads == [0, 30, 60, 90]
        assert len(decoder.skips) == 95 - 4
        assert decoder.skips == sorted(decoder.skips)
        assert decoder.released

    def test_chunk_not_starting_on_a_sampled_frame(self, long_registry, extractor):
        """Test a chunk starting mid-second seeks to its start and samples correctly"""
        result = run_chunk(Chunk(333, 340), 2, long_registry.for_path(), extractor)

        assert [p.index for p in result] == [334, 336, 338]
        assert long_registry.instances[0].seeks == [333]

    def test_each_call_opens_its_own_decoder(self, long_registry, extractor):
        """Test two chunks never share a decoder instance"""
        factory = long_registry.for_path()
        run_chunk(Chunk(0, 10), 2, factory, extractor)
        run_chunk(Chunk(10, 20), 2, factory, extractor)

        assert len(long_registry.instances) == 2
        assert [d.seeks for d in long_registry.instances] == [[0], [10]]


class TestRunChunkFailures:
    """Test that failures carry the chunk range and discard partial results"""

    def test_read_failure_carries_chunk_and_index(self, extractor):
        """Test a failed read raises DecodeError with context"""
        registry = DecoderRegistry(fps=30, frame_count=95, fail_read_at=60)

        with pytest.raises(DecodeError) as exc_info:
            run_chunk(Chunk(0, 95), 30, registry.for_path(), extractor)

        assert exc_info.value.chunk == Chunk(0, 95)
        assert exc_info.value.frame_index == 60
        assert "chunk [0, 95)" in str(exc_info.value)
        assert registry.instances[0].released

    def test_skip_failure_is_fatal(self, extractor):
        """Test a failed grab raises DecodeError"""
        registry = DecoderRegistry(fps=30, frame_count=95, fail_skip_at=45)

        with pytest.raises(DecodeError) as exc_info:
            run_chunk(Chunk(0, 95), 30, registry.for_path(), extractor)

        assert exc_info.value.frame_index == 45

    def test_seek_failure_is_fatal(self, extractor):
        """Test a failed seek raises SeekError for the chunk"""
        registry = DecoderRegistry(fps=30, frame_count=95, fail_seek_to=30)

        with pytest.raises(SeekError) as exc_info:
            run_chunk(Chunk(30, 95), 30, registry.for_path(), extractor)

        assert exc_info.value.chunk == Chunk(30, 95)

    def test_extractor_exception_becomes_extraction_error(self, registry):
        """Test arbitrary extractor exceptions are wrapped"""
        with pytest.raises(ExtractionError) as exc_info:
            run_chunk(Chunk(0, 95), 30, registry.for_path(), RaisingExtractor(bad_index=60))

        assert exc_info.value.frame_index == 60
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_running_past_the_end_fails(self, extractor):
        """Test a chunk longer than the real stream raises instead of truncating"""
        registry = DecoderRegistry(fps=30, frame_count=50)

        with pytest.raises(DecodeError):
            run_chunk(Chunk(0, 95), 30, registry.for_path(), extractor)


class TestChunkWorker:
    """Test the bound worker callable"""

    def test_call_delegates_to_run_chunk(self, registry, extractor):
        """Test ChunkWorker(chunk) matches run_chunk"""
        worker = ChunkWorker(fps=30, decoder_factory=registry.for_path(), extractor=extractor)
        assert [p.index for p in worker(Chunk(0, 95))] == [0, 30, 60, 90]
