"""Detection configuration - the thresholds that shape note segmentation."""

import math
from dataclasses import dataclass, asdict, fields, replace as dc_replace
from typing import Any, Dict

# Bump when a field is added, removed or changes meaning.
CONFIG_SCHEMA_VERSION = 1


@dataclass(frozen=True)
class DetectionConfig:
    """Configuration for pitch-frame to note detection.

    Attributes:
        min_confidence: Minimum frame confidence to count as voiced (default: 0.3)
        max_gap_seconds: Largest gap between frames of one note (default: 0.05)
        max_jump_semitones: Largest frame-to-frame pitch jump within a note (default: 1.2)
        max_stddev_semitones: Largest pitch spread (sample std) within a note (default: 0.6)
        min_frames_per_note: Minimum voiced frames per note (default: 3)
        min_note_seconds: Minimum note duration in seconds (default: 0.06)
    """

    min_confidence: float = 0.3
    max_gap_seconds: float = 0.05
    max_jump_semitones: float = 1.2
    max_stddev_semitones: float = 0.6
    min_frames_per_note: int = 3
    min_note_seconds: float = 0.06

    def __post_init__(self):
        if not (0.0 <= self.min_confidence <= 1.0):
            raise ValueError(
                f"min_confidence must be in [0, 1], got {self.min_confidence}"
            )
        for name in (
            "max_gap_seconds",
            "max_jump_semitones",
            "max_stddev_semitones",
            "min_note_seconds",
        ):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be finite and >= 0, got {value}")
        if isinstance(self.min_frames_per_note, bool) or not isinstance(
            self.min_frames_per_note, int
        ):
            raise ValueError(
                f"min_frames_per_note must be an integer, got {self.min_frames_per_note!r}"
            )
        if self.min_frames_per_note < 1:
            raise ValueError(
                f"min_frames_per_note must be >= 1, got {self.min_frames_per_note}"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DetectionConfig":
        """
        Build a config from a (possibly partial) dictionary.

        Missing keys take their defaults. ``schema_version``, when present,
        must match CONFIG_SCHEMA_VERSION.

        Raises:
            ValueError: On unknown keys, a schema mismatch or invalid values
        """
        data = dict(data)
        version = data.pop("schema_version", CONFIG_SCHEMA_VERSION)
        if version != CONFIG_SCHEMA_VERSION:
            raise ValueError(
                f"Unsupported config schema_version {version}, "
                f"expected {CONFIG_SCHEMA_VERSION}"
            )

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output, including the schema version."""
        return {"schema_version": CONFIG_SCHEMA_VERSION, **asdict(self)}

    def replace(self, **overrides: Any) -> "DetectionConfig":
        """Return a copy with the given fields overridden (None values are ignored)."""
        overrides = {k: v for k, v in overrides.items() if v is not None}
        return dc_replace(self, **overrides)
