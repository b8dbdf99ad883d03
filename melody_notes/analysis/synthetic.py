"""Synthetic pitch estimator - a stand-in melody for demos and tests.

Produces phrases of 0.35 s voiced frames followed by 0.10 s of silence,
stepping up a major scale, with a light 5 Hz vibrato and a slowly wavering
confidence.
"""

import numpy as np
from typing import List, Sequence

from ..core import PitchObservation, semitone_to_freq

MAJOR_STEPS = (0, 2, 4, 5, 7, 9, 11)


class SyntheticPitchEstimator:
    """Generate pitch observations without audio."""

    def __init__(
        self,
        frame_hop_seconds: float = 0.01,
        max_duration_seconds: float = 20.0,
        base_pitch: int = 60,  # C4
        voiced_seconds: float = 0.35,
        unvoiced_seconds: float = 0.10,
        scale_steps: Sequence[int] = MAJOR_STEPS,
        vibrato_semitones: float = 0.15,
        vibrato_hz: float = 5.0,
    ):
        if frame_hop_seconds <= 0:
            raise ValueError(f"frame_hop_seconds must be > 0, got {frame_hop_seconds}")
        if voiced_seconds <= 0 or unvoiced_seconds < 0:
            raise ValueError("voiced_seconds must be > 0 and unvoiced_seconds >= 0")
        if not scale_steps:
            raise ValueError("scale_steps must not be empty")
        self.frame_hop_seconds = frame_hop_seconds
        self.max_duration_seconds = max_duration_seconds
        self.base_pitch = base_pitch
        self.voiced_seconds = voiced_seconds
        self.unvoiced_seconds = unvoiced_seconds
        self.scale_steps = tuple(scale_steps)
        self.vibrato_semitones = vibrato_semitones
        self.vibrato_hz = vibrato_hz

    @property
    def phrase_seconds(self) -> float:
        return self.voiced_seconds + self.unvoiced_seconds

    def estimate(self, duration_seconds: float) -> List[PitchObservation]:
        """
        Generate observations covering ``duration_seconds`` (capped).

        Returns:
            At least one observation, one per hop
        """
        duration = max(0.0, min(duration_seconds, self.max_duration_seconds))
        total = max(1, int(np.floor(duration / self.frame_hop_seconds)))

        observations = []
        for i in range(total):
            t = i * self.frame_hop_seconds
            phrase_index = int(np.floor(t / self.phrase_seconds))
            phase = t - phrase_index * self.phrase_seconds

            if phase >= self.voiced_seconds:
                observations.append(PitchObservation(time=t, frequency_hz=None, confidence=0.0))
                continue

            step = self.scale_steps[phrase_index % len(self.scale_steps)]
            vibrato = np.sin(2 * np.pi * self.vibrato_hz * t) * self.vibrato_semitones
            freq = semitone_to_freq(self.base_pitch + step + vibrato)

            confidence = 0.85 - 0.1 * abs(np.sin(2 * np.pi * 0.7 * t))
            observations.append(
                PitchObservation(
                    time=t,
                    frequency_hz=float(freq),
                    confidence=float(np.clip(confidence, 0.0, 1.0)),
                )
            )

        return observations

