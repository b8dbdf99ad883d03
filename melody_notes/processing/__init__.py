"""Processing layer - Note-level post-processing.

This layer refines detected notes:
- Scale quantization (snap pitches to a key)
"""

from .scale import (
    MusicalKey,
    ScaleQuantizer,
    SCALES,
    MAX_SNAP_RADIUS,
    snap_to_scale,
    parse_key,
    note_to_pitch_class,
)

__all__ = [
    "MusicalKey",
    "ScaleQuantizer",
    "SCALES",
    "MAX_SNAP_RADIUS",
    "snap_to_scale",
    "parse_key",
    "note_to_pitch_class",
]
