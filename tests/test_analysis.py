"""Tests for pitch estimators feeding the detection pipeline."""

import numpy as np
import pytest

from melody_notes.analysis import PitchTracker, SyntheticPitchEstimator
from melody_notes.detection import NoteDetector
from melody_notes.output import NoteModelAdapter
from melody_notes.processing import parse_key


def generate_sine_wave(freq: float, duration: float, sr: int = 22050) -> np.ndarray:
    """Generate a sine wave at given frequency."""
    t = np.linspace(0, duration, int(sr * duration), endpoint=False)
    return (0.5 * np.sin(2 * np.pi * freq * t)).astype(np.float32)


class TestSyntheticPitchEstimator:
    """Tests for the synthetic stepped-scale estimator."""

    def test_frame_layout(self):
        observations = SyntheticPitchEstimator().estimate(1.0)
        assert len(observations) in (99, 100)
        assert observations[0].time == 0.0
        assert observations[0].is_voiced
        # 0.35s-0.45s of each phrase is silent
        assert not observations[40].is_voiced
        assert observations[50].is_voiced

    def test_confidence_range(self):
        observations = SyntheticPitchEstimator().estimate(2.0)
        voiced = [o.confidence for o in observations if o.is_voiced]
        assert min(voiced) >= 0.75 - 1e-9
        assert max(voiced) <= 0.85 + 1e-9

    def test_duration_is_capped(self):
        estimator = SyntheticPitchEstimator(max_duration_seconds=1.0)
        assert len(estimator.estimate(10.0)) <= 100
        assert len(estimator.estimate(0.0)) == 1

    def test_detects_major_scale(self):
        observations = SyntheticPitchEstimator().estimate(3.15)
        notes = NoteDetector().detect(observations)
        assert [n.pitch for n in notes] == [60, 62, 64, 65, 67, 69, 71]
        for note in notes:
            assert note.duration == pytest.approx(0.35, abs=0.015)
            assert 0.75 <= note.confidence <= 0.85

    def test_snapped_to_other_key(self):
        observations = SyntheticPitchEstimator().estimate(3.15)
        notes = NoteDetector().detect(observations)
        segments = NoteModelAdapter(key=parse_key("C minor")).to_segments(notes)
        # E -> D#(Eb), A -> G#(Ab), B -> A#(Bb): all move down a semitone
        assert [s.snapped_semitone for s in segments] == [60, 62, 63, 65, 67, 68, 70]

    def test_invalid_settings(self):
        with pytest.raises(ValueError):
            SyntheticPitchEstimator(frame_hop_seconds=0.0)
        with pytest.raises(ValueError):
            SyntheticPitchEstimator(scale_steps=())


class TestPitchTracker:
    """Tests for the librosa-based tracker."""

    def test_invalid_settings(self):
        with pytest.raises(ValueError, match="Unknown method"):
            PitchTracker(method="crepe")
        with pytest.raises(ValueError):
            PitchTracker(fmin=500.0, fmax=100.0)

    def test_track_sine_a4(self):
        sr = 22050
        audio = generate_sine_wave(440.0, 1.0, sr)
        tracker = PitchTracker(sr=sr, hop_length=256)

        observations = tracker.track(audio)
        assert len(observations) > 0
        assert observations[1].time - observations[0].time == pytest.approx(256 / sr)

        notes = NoteDetector().detect(observations)
        assert len(notes) >= 1
        longest = max(notes, key=lambda n: n.duration)
        assert longest.pitch == 69
        assert longest.duration > 0.5
