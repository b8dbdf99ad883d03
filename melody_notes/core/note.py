"""Frame and note data classes - the units the detection pipeline passes around."""

import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .constants import A4_HZ, A4_MIDI, PITCH_NAMES, SEMITONES_PER_OCTAVE


def freq_to_semitone(freq: float) -> float:
    """Convert frequency (Hz) to a continuous MIDI-scale pitch."""
    return A4_MIDI + SEMITONES_PER_OCTAVE * math.log2(freq / A4_HZ)


def semitone_to_freq(semitone: float) -> float:
    """Convert a (possibly fractional) MIDI pitch to frequency (Hz)."""
    return A4_HZ * (2 ** ((semitone - A4_MIDI) / SEMITONES_PER_OCTAVE))


def pitch_name(pitch: int) -> str:
    """Get note name (e.g., 'C4', 'A#3')."""
    octave = (pitch // 12) - 1
    return f"{PITCH_NAMES[pitch % 12]}{octave}"


@dataclass(frozen=True)
class PitchObservation:
    """One analysis frame from a pitch estimator.

    ``frequency_hz`` is None for unvoiced frames (silence or noise).
    """

    time: float  # seconds
    frequency_hz: Optional[float]
    confidence: float  # 0..1

    @property
    def is_voiced(self) -> bool:
        return self.frequency_hz is not None

    @staticmethod
    def from_arrays(
        times: Sequence[float],
        frequencies: Sequence[float],
        confidences: Sequence[float],
    ) -> List["PitchObservation"]:
        """
        Build observations from parallel arrays (e.g. pYIN or CREPE output).

        NaN, zero and negative frequencies are stored as unvoiced.

        Args:
            times: Frame times in seconds
            frequencies: Frequencies in Hz
            confidences: Per-frame confidence / voicing probability

        Returns:
            List of PitchObservation
        """
        times = np.asarray(times, dtype=float)
        frequencies = np.asarray(frequencies, dtype=float)
        confidences = np.nan_to_num(np.asarray(confidences, dtype=float), nan=0.0)

        if not (len(times) == len(frequencies) == len(confidences)):
            raise ValueError(
                f"Array lengths differ: times={len(times)}, "
                f"frequencies={len(frequencies)}, confidences={len(confidences)}"
            )

        voiced = np.isfinite(frequencies) & (frequencies > 0)
        return [
            PitchObservation(
                time=float(t),
                frequency_hz=float(f) if v else None,
                confidence=float(c),
            )
            for t, f, c, v in zip(times, frequencies, confidences, voiced)
        ]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class VoicedFrame:
    """A confident, voiced frame converted to the semitone scale."""

    time: float
    pitch_semitone: float  # continuous MIDI pitch
    confidence: float


@dataclass(frozen=True)
class DetectedNote:
    """A note event produced by the detection pipeline."""

    id: str
    start_time: float  # seconds
    end_time: float  # seconds
    pitch: int  # MIDI pitch
    confidence: float  # 0..1

    @property
    def duration(self) -> float:
        """Note duration in seconds."""
        return self.end_time - self.start_time

    @property
    def pitch_name(self) -> str:
        return pitch_name(self.pitch)

    @property
    def pitch_class(self) -> int:
        """Get pitch class (0-11, where 0=C)."""
        return self.pitch % 12

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
