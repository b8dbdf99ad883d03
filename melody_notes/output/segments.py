"""Note segments - the editable note representation shared with the editor.

Detected notes are converted into NoteSegments carrying neutral performance
parameters (pitch offset, vibrato and drift amounts, time stretch, formant
shift). A resynthesis engine consumes the segments as ShiftRegions: note
boundaries plus a pitch shift in semitones.
"""

import uuid
from dataclasses import dataclass, field, asdict, fields, replace
from typing import Any, Dict, Iterable, List, Optional

from ..core import DetectedNote, pitch_name
from ..processing import MusicalKey, snap_to_scale


@dataclass
class NoteSegment:
    """An editable note."""

    start_time: float  # seconds
    end_time: float  # seconds
    base_semitone: int  # MIDI pitch as detected
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    pitch_offset: float = 0.0  # semitones
    enabled: bool = True

    # tuning
    pitch_center_offset: float = 0.0  # semitones
    pitch_mod_amount: float = 1.0  # 0..2 (0 = flat, 1 = as sung)
    pitch_drift_amount: float = 1.0  # 0..2 (0 = no drift)

    # timing
    time_stretch_start: float = 1.0  # 1.0 = original
    time_stretch_end: float = 1.0

    # formant
    formant_shift: float = 0.0  # semitones, 0 = original

    snapped_semitone: Optional[int] = None
    confidence: Optional[float] = None

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @property
    def target_semitone(self) -> float:
        """Pitch the note should sound at after snapping and offsets."""
        base = (
            self.snapped_semitone
            if self.snapped_semitone is not None
            else self.base_semitone
        )
        return base + self.pitch_offset + self.pitch_center_offset

    @property
    def shift_semitones(self) -> float:
        """Pitch shift to apply relative to the recorded pitch."""
        return self.target_semitone - self.base_semitone

    @property
    def pitch_name(self) -> str:
        return pitch_name(self.base_semitone)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NoteSegment":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class ShiftRegion:
    """A span of audio and the pitch shift to apply to it."""

    start_time: float
    end_time: float
    semitones: float


@dataclass
class NoteTrack:
    """The notes of one recording."""

    sample_rate: int
    duration: float  # seconds
    notes: List[NoteSegment] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sample_rate": self.sample_rate,
            "duration": self.duration,
            "notes": [n.to_dict() for n in self.notes],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NoteTrack":
        return cls(
            sample_rate=int(data["sample_rate"]),
            duration=float(data["duration"]),
            notes=[NoteSegment.from_dict(n) for n in data.get("notes", [])],
        )


class NoteModelAdapter:
    """Convert detected notes to NoteSegments, optionally snapping to a key."""

    def __init__(self, key: Optional[MusicalKey] = None):
        """
        Initialize NoteModelAdapter.

        Args:
            key: Key used to fill ``snapped_semitone`` (None = no snapping)
        """
        self.key = key

    def to_segments(self, detected: Iterable[DetectedNote]) -> List[NoteSegment]:
        """
        Convert detected notes to segments sorted by start time.

        Notes with an empty or negative span are skipped.
        """
        segments = [
            NoteSegment(
                id=note.id,
                start_time=note.start_time,
                end_time=note.end_time,
                base_semitone=note.pitch,
                snapped_semitone=self._snap(note.pitch),
                confidence=note.confidence,
            )
            for note in detected
            if note.end_time > note.start_time
        ]
        segments.sort(key=lambda s: s.start_time)
        return segments

    def apply_to_track(
        self,
        track: NoteTrack,
        detected: Iterable[DetectedNote],
    ) -> NoteTrack:
        """Return a copy of ``track`` whose notes are replaced by ``detected``."""
        return NoteTrack(
            sample_rate=track.sample_rate,
            duration=track.duration,
            notes=self.to_segments(detected),
        )

    def resnap(
        self,
        segments: Iterable[NoteSegment],
        key: Optional[MusicalKey] = None,
    ) -> List[NoteSegment]:
        """
        Re-apply quantization to existing segments without re-running detection.

        Uses ``key`` when given, else the adapter's key; with neither, the
        snapped pitch falls back to the base pitch. Edited parameters are
        preserved.
        """
        adapter = NoteModelAdapter(key) if key is not None else self
        return [
            replace(seg, snapped_semitone=adapter._snap(seg.base_semitone))
            for seg in segments
        ]

    @staticmethod
    def shift_regions(segments: Iterable[NoteSegment]) -> List[ShiftRegion]:
        """Boundaries and pitch shifts of the enabled segments, in time order."""
        regions = [
            ShiftRegion(
                start_time=seg.start_time,
                end_time=seg.end_time,
                semitones=seg.shift_semitones,
            )
            for seg in segments
            if seg.enabled and seg.end_time > seg.start_time
        ]
        regions.sort(key=lambda r: r.start_time)
        return regions

    def _snap(self, pitch: int) -> Optional[int]:
        if self.key is None:
            return pitch
        return snap_to_scale(pitch, self.key)
