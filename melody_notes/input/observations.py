"""Pitch observation files - read and write estimator output.

Supported formats:
- JSON: a list of frames, or an object with a "frames" list. Each frame has
  "time", "confidence" and a frequency under "frequency_hz", "f0" or
  "frequency" (null for unvoiced).
- CSV: columns time,frequency,confidence (CREPE's .f0.csv layout). Empty,
  zero or NaN frequencies are unvoiced.
"""

import csv
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from ..core import PitchObservation

SUPPORTED_FORMATS = {".json", ".csv"}

FREQUENCY_KEYS = ("frequency_hz", "f0", "frequency")


def load_observations(path: Union[str, Path]) -> List[PitchObservation]:
    """
    Load pitch observations from a JSON or CSV file.

    Args:
        path: Path to the observation file

    Returns:
        List of PitchObservation in file order

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If the format is unsupported or a frame is malformed
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Observation file not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_FORMATS:
        raise ValueError(
            f"Unsupported format: {path.suffix}. "
            f"Supported: {sorted(SUPPORTED_FORMATS)}"
        )

    if suffix == ".json":
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return parse_observations(data)

    with open(path, "r", newline="", encoding="utf-8") as f:
        return _read_csv(f)


def parse_observations(data: Any) -> List[PitchObservation]:
    """Build observations from decoded JSON data."""
    if isinstance(data, dict):
        if "frames" not in data:
            raise ValueError("Expected a 'frames' list in observation object")
        data = data["frames"]
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of frames, got {type(data).__name__}")
    return [_frame_from_dict(frame, i) for i, frame in enumerate(data)]


def save_observations(
    observations: Iterable[PitchObservation],
    path: Union[str, Path],
) -> None:
    """Write observations as JSON ({"frames": [...]})."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {"frames": [obs.to_dict() for obs in observations]}
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def _frame_from_dict(frame: Dict[str, Any], index: int) -> PitchObservation:
    if not isinstance(frame, dict):
        raise ValueError(f"Frame {index}: expected an object, got {type(frame).__name__}")
    try:
        time = float(frame["time"])
        confidence = float(frame.get("confidence", 0.0))
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Frame {index}: invalid time/confidence ({e})") from e

    frequency = None
    for key in FREQUENCY_KEYS:
        if key in frame:
            frequency = frame[key]
            break

    return PitchObservation(
        time=time,
        frequency_hz=_parse_frequency(frequency, index),
        confidence=confidence,
    )


def _parse_frequency(value: Any, index: int) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        freq = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Frame {index}: invalid frequency {value!r}") from e
    # NaN fails the comparison and is treated as unvoiced
    if not freq > 0:
        return None
    return freq


def _read_csv(f) -> List[PitchObservation]:
    reader = csv.DictReader(f)
    if reader.fieldnames is None:
        return []
    fieldnames = [name.strip().lower() for name in reader.fieldnames]
    reader.fieldnames = fieldnames
    if "time" not in fieldnames:
        raise ValueError(f"CSV needs a 'time' column, got {fieldnames}")

    return [_frame_from_dict(row, i) for i, row in enumerate(reader)]
