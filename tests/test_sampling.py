"""
Tests for the one-frame-per-second sampling policy
"""
import pytest

from video_colors.errors import ConfigError
from video_colors.sampling import is_sampled, normalize_fps, sampled_indices


class TestSamplingPolicy:
    """Test which frame indices get sampled"""

    def test_first_frame_of_each_second(self):
        """Test that only multiples of fps are sampled"""
        assert is_sampled(0, 30)
        assert is_sampled(30, 30)
        assert not is_sampled(1, 30)
        assert not is_sampled(29, 30)

    def test_sampled_indices_for_95_frames_at_30_fps(self):
        """Test the partial last second still yields a sample"""
        assert sampled_indices(95, 30) == [0, 30, 60, 90]

    def test_short_video_yields_single_sample(self):
        """Test a video shorter than one second samples only frame 0"""
        assert sampled_indices(10, 30) == [0]

    def test_empty_video_yields_no_samples(self):
        """Test zero frames produce no samples"""
        assert sampled_indices(0, 25) == []

    @pytest.mark.parametrize("fps", [0, -1])
    def test_non_positive_fps_is_rejected(self, fps):
        """Test fps <= 0 is a configuration error"""
        with pytest.raises(ConfigError):
            sampled_indices(100, fps)


class TestNormalizeFps:
    """Test frame rate truncation"""

    def test_fractional_rate_is_truncated(self):
        """Test 29.97 fps is truncated, not rounded"""
        assert normalize_fps(29.97) == 29
        assert normalize_fps(59.94) == 59

    def test_integer_rate_is_unchanged(self):
        """Test whole frame rates pass through"""
        assert normalize_fps(25.0) == 25

    def test_sub_one_rate_becomes_zero(self):
        """Test rates below 1 truncate to 0 and are then rejected downstream"""
        assert normalize_fps(0.5) == 0
