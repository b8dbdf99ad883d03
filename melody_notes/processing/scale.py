"""Scale quantization - Snap note pitches to a musical key.

Each pitch is snapped on its own: an in-scale pitch is kept, otherwise the
nearest scale tone within half an octave wins, preferring the lower tone when
both sides are equally far.
"""

from dataclasses import dataclass, replace
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from ..core import DetectedNote, PITCH_NAMES

# Semitone intervals from the root
SCALES: Dict[str, Tuple[int, ...]] = {
    "major": (0, 2, 4, 5, 7, 9, 11),
    "minor": (0, 2, 3, 5, 7, 8, 10),
    "harmonic minor": (0, 2, 3, 5, 7, 8, 11),
    "melodic minor": (0, 2, 3, 5, 7, 9, 11),
    "dorian": (0, 2, 3, 5, 7, 9, 10),
    "phrygian": (0, 1, 3, 5, 7, 8, 10),
    "lydian": (0, 2, 4, 6, 7, 9, 11),
    "mixolydian": (0, 2, 4, 5, 7, 9, 10),
    "locrian": (0, 1, 3, 5, 6, 8, 10),
    "pentatonic major": (0, 2, 4, 7, 9),
    "pentatonic minor": (0, 3, 5, 7, 10),
    "chromatic": tuple(range(12)),
}

SCALE_ALIASES: Dict[str, str] = {
    "maj": "major",
    "ionian": "major",
    "min": "minor",
    "m": "minor",
    "natural minor": "minor",
    "aeolian": "minor",
}

FLAT_TO_SHARP: Dict[str, str] = {
    "Db": "C#",
    "Eb": "D#",
    "Gb": "F#",
    "Ab": "G#",
    "Bb": "A#",
    "Cb": "B",
    "Fb": "E",
    "E#": "F",
    "B#": "C",
}

# Largest displacement the search will try, in semitones
MAX_SNAP_RADIUS = 6


def note_to_pitch_class(name: str) -> int:
    """Convert a note name ('C', 'F#', 'Bb') to a pitch class (0-11)."""
    token = name.strip()
    if not token:
        raise ValueError("Empty note name")
    token = token[0].upper() + token[1:]
    token = FLAT_TO_SHARP.get(token, token)
    if token not in PITCH_NAMES:
        raise ValueError(f"Unknown note name: {name!r}")
    return PITCH_NAMES.index(token)


def resolve_scale(scale: str) -> str:
    """Normalize a scale name, resolving aliases."""
    key = " ".join(scale.lower().replace("_", " ").replace("-", " ").split())
    key = SCALE_ALIASES.get(key, key)
    if key not in SCALES:
        raise ValueError(
            f"Unknown scale: {scale!r}. Available: {', '.join(SCALES)}"
        )
    return key


@dataclass(frozen=True)
class MusicalKey:
    """A root pitch class plus the scale degrees (relative to the root)."""

    root_pitch_class: int
    scale_degrees: FrozenSet[int]
    scale_name: Optional[str] = None

    def __post_init__(self):
        if not (0 <= self.root_pitch_class <= 11):
            raise ValueError(
                f"root_pitch_class must be in 0-11, got {self.root_pitch_class}"
            )
        degrees = frozenset(self.scale_degrees)
        bad = sorted(d for d in degrees if not (0 <= d <= 11))
        if bad:
            raise ValueError(f"Scale degrees must be in 0-11, got {bad}")
        object.__setattr__(self, "scale_degrees", degrees)

    @classmethod
    def from_name(cls, root: "int | str", scale: str = "major") -> "MusicalKey":
        """
        Build a key from a root and a scale name.

        Args:
            root: Pitch class (any int, reduced modulo 12) or note name
            scale: Scale name from SCALES (aliases allowed)
        """
        if isinstance(root, str):
            root_pc = note_to_pitch_class(root)
        else:
            root_pc = root % 12
        scale_name = resolve_scale(scale)
        return cls(root_pc, frozenset(SCALES[scale_name]), scale_name)

    @property
    def root_name(self) -> str:
        return PITCH_NAMES[self.root_pitch_class]

    @property
    def name(self) -> str:
        """E.g. 'C major', or the root with its degrees for custom scales."""
        if self.scale_name:
            return f"{self.root_name} {self.scale_name}"
        degrees = ",".join(str(d) for d in sorted(self.scale_degrees))
        return f"{self.root_name} [{degrees}]"

    @property
    def pitch_classes(self) -> FrozenSet[int]:
        """Absolute pitch classes (0=C) in the key."""
        return frozenset((self.root_pitch_class + d) % 12 for d in self.scale_degrees)

    def contains(self, pitch: int) -> bool:
        """Whether a MIDI pitch belongs to the key."""
        return (pitch - self.root_pitch_class) % 12 in self.scale_degrees


def parse_key(text: str) -> MusicalKey:
    """
    Parse a key like 'C major', 'F# minor', 'Bb dorian' or 'Am'.

    A bare root ('G') means major.
    """
    parts = text.strip().split(None, 1)
    if not parts:
        raise ValueError("Empty key")
    root = parts[0]
    scale = parts[1] if len(parts) > 1 else "major"

    # Compact minor form: 'Am', 'C#m'
    if len(parts) == 1 and len(root) > 1 and root.endswith("m"):
        root, scale = root[:-1], "minor"

    return MusicalKey.from_name(root, scale)


def snap_to_scale(pitch: int, key: MusicalKey) -> int:
    """
    Snap a MIDI pitch to the nearest tone of ``key``.

    Searches outward one semitone at a time up to MAX_SNAP_RADIUS, testing
    below before above. Returns the pitch unchanged if it is already in the
    key or if no scale tone lies within range.
    """
    if key.contains(pitch):
        return pitch

    for distance in range(1, MAX_SNAP_RADIUS + 1):
        if key.contains(pitch - distance):
            return pitch - distance
        if key.contains(pitch + distance):
            return pitch + distance

    # Only reachable for empty or unusually sparse custom scales
    return pitch


class ScaleQuantizer:
    """Quantize note pitches to a musical key."""

    def __init__(self, key: MusicalKey):
        """
        Initialize ScaleQuantizer.

        Args:
            key: Target key
        """
        self.key = key

    def snap(self, pitch: int) -> int:
        """Snap a single MIDI pitch."""
        return snap_to_scale(pitch, self.key)

    def quantize(self, notes: Iterable[DetectedNote]) -> List[DetectedNote]:
        """
        Return copies of ``notes`` with snapped pitches.

        Detection output is left untouched; the editor adapter usually keeps
        the original pitch and attaches the snapped one alongside.
        """
        return [replace(note, pitch=self.snap(note.pitch)) for note in notes]
