"""Frame filtering - keep confident, voiced pitch observations."""

import math
from typing import Iterable, List

from ..core import PitchObservation, VoicedFrame, freq_to_semitone


class FrameFilter:
    """Discard unvoiced and low-confidence observations."""

    def __init__(self, min_confidence: float = 0.3):
        """
        Initialize FrameFilter.

        Args:
            min_confidence: Minimum confidence for a frame to be kept (0-1)
        """
        if not (0.0 <= min_confidence <= 1.0):
            raise ValueError(f"min_confidence must be in [0, 1], got {min_confidence}")
        self.min_confidence = min_confidence

    def filter(self, observations: Iterable[PitchObservation]) -> List[VoicedFrame]:
        """
        Convert observations to voiced frames.

        Frames with a missing, non-finite or non-positive frequency, a
        non-finite or negative time, or confidence below the threshold are
        dropped.

        Args:
            observations: Pitch observations from an estimator

        Returns:
            Voiced frames sorted by time (stable for equal times)
        """
        frames = [
            VoicedFrame(
                time=obs.time,
                pitch_semitone=freq_to_semitone(obs.frequency_hz),
                confidence=obs.confidence,
            )
            for obs in observations
            if self._is_usable(obs)
        ]
        frames.sort(key=lambda f: f.time)
        return frames

    def _is_usable(self, obs: PitchObservation) -> bool:
        freq = obs.frequency_hz
        if freq is None or not math.isfinite(freq) or freq <= 0:
            return False
        if not math.isfinite(obs.time) or obs.time < 0:
            return False
        # NaN confidence compares False and is dropped here
        return obs.confidence >= self.min_confidence
