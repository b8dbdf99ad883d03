"""Tests for the output layer: note segments, tracks, shift regions and MIDI."""

import pretty_midi
import pytest

from melody_notes.core import DetectedNote
from melody_notes.processing import parse_key
from melody_notes.output import (
    NoteSegment,
    NoteTrack,
    NoteModelAdapter,
    ShiftRegion,
    MIDIExporter,
)


def detected(pitch, start, end, note_id=None, confidence=0.9):
    return DetectedNote(
        id=note_id or f"n{pitch}-{start}",
        start_time=start,
        end_time=end,
        pitch=pitch,
        confidence=confidence,
    )


class TestNoteSegment:
    """Tests for NoteSegment defaults and derived pitches."""

    def test_neutral_defaults(self):
        seg = NoteSegment(start_time=0.0, end_time=1.0, base_semitone=60)
        assert seg.pitch_offset == 0.0
        assert seg.pitch_center_offset == 0.0
        assert seg.pitch_mod_amount == 1.0
        assert seg.pitch_drift_amount == 1.0
        assert seg.time_stretch_start == 1.0
        assert seg.time_stretch_end == 1.0
        assert seg.formant_shift == 0.0
        assert seg.enabled
        assert seg.id

    def test_target_and_shift(self):
        seg = NoteSegment(
            start_time=0.0,
            end_time=1.0,
            base_semitone=61,
            snapped_semitone=60,
            pitch_offset=2.0,
            pitch_center_offset=0.5,
        )
        assert seg.target_semitone == 62.5
        assert seg.shift_semitones == 1.5

    def test_dict_round_trip(self):
        seg = NoteSegment(start_time=0.1, end_time=0.4, base_semitone=64, formant_shift=1.0)
        assert NoteSegment.from_dict(seg.to_dict()) == seg


class TestNoteModelAdapter:
    """Tests for NoteModelAdapter."""

    def test_without_key_snapped_equals_base(self):
        segments = NoteModelAdapter().to_segments([detected(61, 0.0, 0.5)])
        assert segments[0].base_semitone == 61
        assert segments[0].snapped_semitone == 61
        assert segments[0].shift_semitones == 0

    def test_with_key(self):
        adapter = NoteModelAdapter(key=parse_key("C major"))
        segments = adapter.to_segments([detected(61, 0.0, 0.5, note_id="x")])
        seg = segments[0]
        assert seg.id == "x"
        assert seg.base_semitone == 61
        assert seg.snapped_semitone == 60
        assert seg.shift_semitones == -1
        assert seg.confidence == 0.9

    def test_skips_empty_spans_and_sorts(self):
        notes = [
            detected(64, 1.0, 1.5),
            detected(62, 0.7, 0.7),
            detected(60, 0.0, 0.5),
        ]
        segments = NoteModelAdapter().to_segments(notes)
        assert [s.base_semitone for s in segments] == [60, 64]

    def test_apply_to_track(self):
        track = NoteTrack(
            sample_rate=44100,
            duration=2.0,
            notes=[NoteSegment(start_time=0.0, end_time=2.0, base_semitone=50)],
        )
        updated = NoteModelAdapter().apply_to_track(track, [detected(60, 0.0, 0.5)])
        assert updated.sample_rate == 44100
        assert updated.duration == 2.0
        assert [n.base_semitone for n in updated.notes] == [60]
        # The original track is not modified
        assert track.notes[0].base_semitone == 50

    def test_resnap_keeps_edits(self):
        adapter = NoteModelAdapter(key=parse_key("C major"))
        segments = adapter.to_segments([detected(61, 0.0, 0.5)])
        segments[0].pitch_offset = 2.0

        resnapped = adapter.resnap(segments, parse_key("D major"))
        assert resnapped[0].snapped_semitone == 61  # C# is in D major
        assert resnapped[0].pitch_offset == 2.0

        cleared = NoteModelAdapter().resnap(segments)
        assert cleared[0].snapped_semitone == 61

    def test_shift_regions(self):
        adapter = NoteModelAdapter(key=parse_key("C major"))
        segments = adapter.to_segments(
            [detected(61, 0.0, 0.5), detected(64, 0.5, 1.0), detected(66, 1.0, 1.5)]
        )
        segments[1].pitch_offset = 0.5
        segments[2].enabled = False

        regions = adapter.shift_regions(segments)
        assert regions == [
            ShiftRegion(start_time=0.0, end_time=0.5, semitones=-1),
            ShiftRegion(start_time=0.5, end_time=1.0, semitones=0.5),
        ]


class TestNoteTrack:
    """Tests for NoteTrack serialization."""

    def test_dict_round_trip(self):
        track = NoteTrack(
            sample_rate=48000,
            duration=1.5,
            notes=NoteModelAdapter(key=parse_key("A minor")).to_segments(
                [detected(70, 0.0, 0.4), detected(72, 0.5, 0.9)]
            ),
        )
        restored = NoteTrack.from_dict(track.to_dict())
        assert restored == track
        assert [n.snapped_semitone for n in restored.notes] == [69, 72]


class TestMIDIExporter:
    """Tests for MIDIExporter."""

    def test_notes_at_target_pitch(self):
        segments = NoteModelAdapter(key=parse_key("C major")).to_segments(
            [detected(61, 0.0, 0.5, confidence=0.5), detected(64, 0.5, 1.0)]
        )
        segments[1].pitch_offset = 3.0

        midi = MIDIExporter().segments_to_pretty_midi(segments)
        notes = midi.instruments[0].notes
        assert [n.pitch for n in notes] == [60, 67]
        assert notes[0].velocity == 64
        assert notes[0].start == pytest.approx(0.0)
        assert notes[1].end == pytest.approx(1.0)

    def test_disabled_segments_skipped(self):
        segments = [
            NoteSegment(start_time=0.0, end_time=0.5, base_semitone=60),
            NoteSegment(start_time=0.5, end_time=1.0, base_semitone=62, enabled=False),
        ]
        midi = MIDIExporter().segments_to_pretty_midi(segments)
        assert len(midi.instruments[0].notes) == 1
        assert midi.instruments[0].notes[0].velocity == 80

    def test_export_file(self, tmp_path):
        segments = [
            NoteSegment(start_time=0.0, end_time=0.5, base_semitone=60),
            NoteSegment(start_time=0.5, end_time=1.0, base_semitone=62),
        ]
        output_path = tmp_path / "out" / "notes.mid"
        MIDIExporter(tempo=100.0).export(segments, str(output_path))

        assert output_path.exists()
        loaded = pretty_midi.PrettyMIDI(str(output_path))
        assert [n.pitch for n in loaded.instruments[0].notes] == [60, 62]
