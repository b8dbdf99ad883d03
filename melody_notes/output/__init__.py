"""Output layer - Hand detected notes to the editor, resynthesis and files.

This layer handles:
- Editable note segments and tracks (shared with the editor)
- Pitch-shift regions for the resynthesis engine
- MIDI files
"""

from .segments import NoteSegment, NoteTrack, NoteModelAdapter, ShiftRegion
from .midi import MIDIExporter

__all__ = [
    "NoteSegment",
    "NoteTrack",
    "NoteModelAdapter",
    "ShiftRegion",
    "MIDIExporter",
]
