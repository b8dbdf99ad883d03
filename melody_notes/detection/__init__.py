"""Detection layer - Pitch frames to discrete note events.

This layer segments a frame-by-frame pitch estimate into notes:
- Frame filtering (voicing and confidence)
- Temporal clustering (gap, jump and spread rules)
- Note synthesis (span, median pitch, confidence)
"""

from .config import DetectionConfig, CONFIG_SCHEMA_VERSION
from .frame_filter import FrameFilter
from .clustering import TemporalClusterer, NoteCluster, sample_stddev
from .synthesis import NoteSynthesizer, SynthesisStats, infer_hop_seconds
from .detector import NoteDetector, DetectionStats, detect_notes

__all__ = [
    "DetectionConfig",
    "CONFIG_SCHEMA_VERSION",
    "FrameFilter",
    "TemporalClusterer",
    "NoteCluster",
    "sample_stddev",
    "NoteSynthesizer",
    "SynthesisStats",
    "infer_hop_seconds",
    "NoteDetector",
    "DetectionStats",
    "detect_notes",
]
