"""Global constants for melody-notes."""

# Pitch names
PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Tuning reference (A4 = 440 Hz = MIDI 69)
A4_HZ = 440.0
A4_MIDI = 69
SEMITONES_PER_OCTAVE = 12

# Pitch estimation defaults
DEFAULT_SR = 22050
DEFAULT_HOP_LENGTH = 512
DEFAULT_HOP_SECONDS = 0.01  # used when the hop cannot be inferred

# MIDI ranges
MIDI_MIN = 0
MIDI_MAX = 127
