"""MIDI export functionality."""

import pretty_midi
from typing import Iterable
from pathlib import Path

from ..core import MIDI_MIN, MIDI_MAX
from .segments import NoteSegment


class MIDIExporter:
    """Export note segments to MIDI format."""

    def __init__(
        self,
        tempo: float = 120.0,
        instrument_name: str = "Voice Oohs",
        instrument_program: int = 53,
        default_velocity: int = 80,
    ):
        """
        Initialize MIDIExporter.

        Args:
            tempo: Tempo in BPM
            instrument_name: MIDI instrument name
            instrument_program: MIDI program number (0-127)
            default_velocity: Velocity for segments without a confidence
        """
        self.tempo = tempo
        self.instrument_name = instrument_name
        self.instrument_program = instrument_program
        self.default_velocity = default_velocity

    def export(self, segments: Iterable[NoteSegment], output_path: str) -> None:
        """
        Export segments to MIDI file.

        Args:
            segments: Note segments
            output_path: Path to output MIDI file
        """
        midi = self.segments_to_pretty_midi(segments)

        # Ensure output directory exists
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        midi.write(str(output_path))

    def segments_to_pretty_midi(
        self, segments: Iterable[NoteSegment]
    ) -> pretty_midi.PrettyMIDI:
        """Convert enabled segments to a PrettyMIDI object without saving.

        Each note sounds at its target pitch (snapped pitch plus offsets),
        rounded to the nearest semitone.
        """
        midi = pretty_midi.PrettyMIDI(initial_tempo=self.tempo)

        instrument = pretty_midi.Instrument(
            program=self.instrument_program,
            name=self.instrument_name,
        )

        for seg in segments:
            if not seg.enabled or seg.end_time <= seg.start_time:
                continue
            pitch = int(round(seg.target_semitone))
            instrument.notes.append(
                pretty_midi.Note(
                    velocity=self._velocity(seg),
                    pitch=max(MIDI_MIN, min(MIDI_MAX, pitch)),
                    start=seg.start_time,
                    end=seg.end_time,
                )
            )

        midi.instruments.append(instrument)
        return midi

    def _velocity(self, seg: NoteSegment) -> int:
        """Map confidence (0-1) to MIDI velocity [20, 127]."""
        if seg.confidence is None:
            return self.default_velocity
        return int(max(20, min(127, round(seg.confidence * 127))))
