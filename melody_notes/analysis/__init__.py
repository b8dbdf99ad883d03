"""Analysis layer - Pitch estimation.

This layer produces frame-by-frame pitch observations:
- librosa pYIN / YIN over a decoded signal
- A synthetic estimator for demos and tests
"""

from .pitch import PitchTracker
from .synthetic import SyntheticPitchEstimator

__all__ = [
    "PitchTracker",
    "SyntheticPitchEstimator",
]
