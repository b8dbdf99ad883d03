"""Pitch tracking - frame-by-frame f0 estimates from a decoded signal."""

import numpy as np
import librosa
from typing import List, Tuple

from ..core import PitchObservation, DEFAULT_SR, DEFAULT_HOP_LENGTH


class PitchTracker:
    """Estimate pitch observations with librosa's pYIN or YIN."""

    METHODS = ("pyin", "yin")

    def __init__(
        self,
        sr: int = DEFAULT_SR,
        hop_length: int = DEFAULT_HOP_LENGTH,
        fmin: float = 65.0,  # C2
        fmax: float = 2093.0,  # C7
        method: str = "pyin",
    ):
        """
        Initialize PitchTracker.

        Args:
            sr: Sample rate of the signals passed to track()
            hop_length: Samples between analysis frames
            fmin: Lowest frequency to search (Hz)
            fmax: Highest frequency to search (Hz)
            method: 'pyin' (with voicing probability) or 'yin'
        """
        if method not in self.METHODS:
            raise ValueError(f"Unknown method: {method!r}. Supported: {self.METHODS}")
        if not (0 < fmin < fmax):
            raise ValueError(f"Expected 0 < fmin < fmax, got fmin={fmin}, fmax={fmax}")
        self.sr = sr
        self.hop_length = hop_length
        self.fmin = fmin
        self.fmax = fmax
        self.method = method

    def track(self, audio: np.ndarray) -> List[PitchObservation]:
        """
        Estimate pitch for every frame of a mono signal.

        Args:
            audio: Mono audio array at ``self.sr``

        Returns:
            One PitchObservation per frame; unvoiced frames have no frequency
        """
        times, f0, confidence = self.detect_f0(audio)
        return PitchObservation.from_arrays(times, f0, confidence)

    def detect_f0(
        self,
        audio: np.ndarray,
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Detect fundamental frequency (f0) over time.

        Returns:
            Tuple of (times, f0 in Hz with NaN when unvoiced, confidence)
        """
        if self.method == "pyin":
            f0, voiced_flag, voiced_prob = librosa.pyin(
                audio,
                fmin=self.fmin,
                fmax=self.fmax,
                sr=self.sr,
                hop_length=self.hop_length,
            )
            f0 = np.where(voiced_flag, f0, np.nan)
            confidence = np.nan_to_num(voiced_prob, nan=0.0)
        else:
            # YIN doesn't return voiced probability
            f0 = librosa.yin(
                audio,
                fmin=self.fmin,
                fmax=self.fmax,
                sr=self.sr,
                hop_length=self.hop_length,
            )
            confidence = np.isfinite(f0).astype(float)

        times = librosa.frames_to_time(
            np.arange(len(f0)),
            sr=self.sr,
            hop_length=self.hop_length,
        )
        return times, f0, confidence
