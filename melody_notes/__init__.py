"""melody-notes - Pitch-frame to note segmentation and scale quantization.

Architecture Layers:
    1. analysis/   - Pitch estimation (librosa pYIN/YIN, synthetic melodies)
    2. input/      - Pitch observation files (JSON, CSV)
    3. detection/  - Frame filtering, temporal clustering, note synthesis
    4. processing/ - Note post-processing (scale quantization)
    5. output/     - Editable note segments, shift regions, MIDI
"""

__version__ = "0.1.0"

# Core types
from .core import PitchObservation, VoicedFrame, DetectedNote

# Analysis layer
from .analysis import PitchTracker, SyntheticPitchEstimator

# Input layer
from .input import load_observations, save_observations

# Detection layer
from .detection import (
    DetectionConfig,
    FrameFilter,
    TemporalClusterer,
    NoteSynthesizer,
    NoteDetector,
    detect_notes,
)

# Processing layer
from .processing import MusicalKey, ScaleQuantizer, snap_to_scale, parse_key

# Output layer
from .output import NoteSegment, NoteTrack, NoteModelAdapter, ShiftRegion, MIDIExporter

__all__ = [
    # Core
    "PitchObservation",
    "VoicedFrame",
    "DetectedNote",
    # Analysis
    "PitchTracker",
    "SyntheticPitchEstimator",
    # Input
    "load_observations",
    "save_observations",
    # Detection
    "DetectionConfig",
    "FrameFilter",
    "TemporalClusterer",
    "NoteSynthesizer",
    "NoteDetector",
    "detect_notes",
    # Processing
    "MusicalKey",
    "ScaleQuantizer",
    "snap_to_scale",
    "parse_key",
    # Output
    "NoteSegment",
    "NoteTrack",
    "NoteModelAdapter",
    "ShiftRegion",
    "MIDIExporter",
]
