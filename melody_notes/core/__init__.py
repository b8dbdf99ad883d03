"""Core types and constants for melody-notes."""

from .note import (
    PitchObservation,
    VoicedFrame,
    DetectedNote,
    freq_to_semitone,
    semitone_to_freq,
    pitch_name,
)
from .constants import (
    MIDI_MIN,
    MIDI_MAX,
    PITCH_NAMES,
    A4_HZ,
    A4_MIDI,
    DEFAULT_SR,
    DEFAULT_HOP_LENGTH,
    DEFAULT_HOP_SECONDS,
)

__all__ = [
    "PitchObservation",
    "VoicedFrame",
    "DetectedNote",
    "freq_to_semitone",
    "semitone_to_freq",
    "pitch_name",
    "PITCH_NAMES",
    "A4_HZ",
    "A4_MIDI",
    "DEFAULT_SR",
    "DEFAULT_HOP_LENGTH",
    "DEFAULT_HOP_SECONDS",
    "MIDI_MIN",
    "MIDI_MAX",
]
