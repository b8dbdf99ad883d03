"""Temporal clustering - group consecutive voiced frames into candidate notes.

A single left-to-right pass. A new cluster starts whenever:
- the time gap to the previous frame exceeds ``max_gap_seconds``
- the pitch jump from the previous frame exceeds ``max_jump_semitones``
- adding the frame would push the cluster's pitch spread (sample standard
  deviation) above ``max_stddev_semitones``

The spread check catches slow drift that passes the jump check frame by frame.
"""

import math
from typing import List, Sequence

import numpy as np

from ..core import VoicedFrame

NoteCluster = List[VoicedFrame]


def sample_stddev(values: Sequence[float]) -> float:
    """Sample standard deviation (n-1 divisor); 0 for fewer than two values."""
    if len(values) <= 1:
        return 0.0
    return float(np.std(values, ddof=1))


class _RunningSpread:
    """Welford accumulator for the pitch spread of the open cluster."""

    def __init__(self):
        self.count = 0
        self.mean = 0.0
        self.m2 = 0.0

    def reset(self, value: float) -> None:
        self.count = 1
        self.mean = value
        self.m2 = 0.0

    def _updated(self, value: float):
        count = self.count + 1
        delta = value - self.mean
        mean = self.mean + delta / count
        m2 = self.m2 + delta * (value - mean)
        return count, mean, m2

    def stddev_with(self, value: float) -> float:
        """Spread the cluster would have if ``value`` were appended."""
        count, _, m2 = self._updated(value)
        if count <= 1:
            return 0.0
        return math.sqrt(max(m2, 0.0) / (count - 1))

    def push(self, value: float) -> None:
        self.count, self.mean, self.m2 = self._updated(value)


class TemporalClusterer:
    """Partition voiced frames into maximal runs that form one note."""

    def __init__(
        self,
        max_gap_seconds: float = 0.05,
        max_jump_semitones: float = 1.2,
        max_stddev_semitones: float = 0.6,
    ):
        """
        Initialize TemporalClusterer.

        Args:
            max_gap_seconds: Largest allowed gap between consecutive frames
            max_jump_semitones: Largest allowed pitch jump between consecutive frames
            max_stddev_semitones: Largest allowed pitch spread within a cluster
        """
        for name, value in (
            ("max_gap_seconds", max_gap_seconds),
            ("max_jump_semitones", max_jump_semitones),
            ("max_stddev_semitones", max_stddev_semitones),
        ):
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be finite and >= 0, got {value}")

        self.max_gap_seconds = max_gap_seconds
        self.max_jump_semitones = max_jump_semitones
        self.max_stddev_semitones = max_stddev_semitones

    def cluster(self, frames: Sequence[VoicedFrame]) -> List[NoteCluster]:
        """
        Group time-ordered voiced frames into clusters.

        Args:
            frames: Voiced frames sorted by time

        Returns:
            Non-empty clusters in time order
        """
        clusters: List[NoteCluster] = []
        current: NoteCluster = []
        spread = _RunningSpread()

        for frame in frames:
            if current and not self._breaks_continuity(current[-1], frame):
                if spread.stddev_with(frame.pitch_semitone) <= self.max_stddev_semitones:
                    current.append(frame)
                    spread.push(frame.pitch_semitone)
                    continue

            if current:
                clusters.append(current)
            current = [frame]
            spread.reset(frame.pitch_semitone)

        if current:
            clusters.append(current)

        return clusters

    def _breaks_continuity(self, prev: VoicedFrame, frame: VoicedFrame) -> bool:
        gap = frame.time - prev.time
        if not math.isfinite(gap) or gap > self.max_gap_seconds:
            return True
        return abs(frame.pitch_semitone - prev.pitch_semitone) > self.max_jump_semitones
