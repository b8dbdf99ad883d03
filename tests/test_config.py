"""Tests for DetectionConfig."""

import pytest

from melody_notes.detection import DetectionConfig, CONFIG_SCHEMA_VERSION


class TestDetectionConfig:
    """Tests for DetectionConfig defaults, overrides and validation."""

    def test_defaults(self):
        config = DetectionConfig()
        assert config.min_confidence == 0.3
        assert config.max_gap_seconds == 0.05
        assert config.max_jump_semitones == 1.2
        assert config.max_stddev_semitones == 0.6
        assert config.min_frames_per_note == 3
        assert config.min_note_seconds == 0.06

    def test_from_partial_dict(self):
        config = DetectionConfig.from_dict({"min_confidence": 0.5, "min_frames_per_note": 5})
        assert config.min_confidence == 0.5
        assert config.min_frames_per_note == 5
        assert config.max_gap_seconds == 0.05

    def test_dict_round_trip(self):
        config = DetectionConfig(max_jump_semitones=2.0)
        data = config.to_dict()
        assert data["schema_version"] == CONFIG_SCHEMA_VERSION
        assert DetectionConfig.from_dict(data) == config

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError, match="Unknown config keys"):
            DetectionConfig.from_dict({"minConfidence": 0.5})

    def test_schema_version_mismatch(self):
        with pytest.raises(ValueError, match="schema_version"):
            DetectionConfig.from_dict({"schema_version": CONFIG_SCHEMA_VERSION + 1})

    def test_replace_ignores_none(self):
        config = DetectionConfig().replace(min_confidence=None, max_gap_seconds=0.1)
        assert config.min_confidence == 0.3
        assert config.max_gap_seconds == 0.1

    @pytest.mark.parametrize(
        "overrides",
        [
            {"min_confidence": -0.1},
            {"min_confidence": 1.1},
            {"max_gap_seconds": -0.01},
            {"max_jump_semitones": float("inf")},
            {"max_stddev_semitones": float("nan")},
            {"min_note_seconds": -1.0},
            {"min_frames_per_note": 0},
            {"min_frames_per_note": 2.5},
            {"min_frames_per_note": True},
        ],
    )
    def test_invalid_values_fail_fast(self, overrides):
        with pytest.raises(ValueError):
            DetectionConfig(**overrides)

    def test_frozen(self):
        config = DetectionConfig()
        with pytest.raises(AttributeError):
            config.min_confidence = 0.9
