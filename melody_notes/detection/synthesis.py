"""Note synthesis - turn accepted clusters into note events."""

import logging
import math
import uuid
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import numpy as np

from ..core import DetectedNote, DEFAULT_HOP_SECONDS
from .clustering import NoteCluster

logger = logging.getLogger(__name__)


def infer_hop_seconds(
    times: Sequence[float],
    default: float = DEFAULT_HOP_SECONDS,
) -> float:
    """
    Estimate the analysis hop from frame timestamps.

    Uses the median of the positive consecutive deltas, which tolerates
    missing and duplicated frames.

    Args:
        times: Frame times in seconds, sorted
        default: Hop returned for fewer than three frames or no positive delta

    Returns:
        Hop size in seconds
    """
    if len(times) <= 2:
        return default
    deltas = np.diff(np.asarray(times, dtype=float))
    deltas = deltas[np.isfinite(deltas) & (deltas > 0)]
    if len(deltas) == 0:
        return default
    return float(np.median(deltas))


def _new_note_id() -> str:
    return str(uuid.uuid4())


@dataclass
class SynthesisStats:
    """Counts from one synthesis pass."""

    dropped_short_frames: int = 0
    dropped_short_duration: int = 0
    dropped_out_of_order: int = 0


class NoteSynthesizer:
    """Convert clusters into DetectedNote events."""

    def __init__(
        self,
        min_frames_per_note: int = 3,
        min_note_seconds: float = 0.06,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        """
        Initialize NoteSynthesizer.

        Args:
            min_frames_per_note: Minimum frames a cluster needs to become a note
            min_note_seconds: Minimum note duration in seconds
            id_factory: Callable producing unique note ids (default: uuid4 strings)
        """
        if min_frames_per_note < 1:
            raise ValueError(
                f"min_frames_per_note must be >= 1, got {min_frames_per_note}"
            )
        if not math.isfinite(min_note_seconds) or min_note_seconds < 0:
            raise ValueError(
                f"min_note_seconds must be finite and >= 0, got {min_note_seconds}"
            )
        self.min_frames_per_note = min_frames_per_note
        self.min_note_seconds = min_note_seconds
        self.id_factory = id_factory or _new_note_id
        self.last_stats = SynthesisStats()

    def synthesize(
        self,
        clusters: Sequence[NoteCluster],
        hop_seconds: float = DEFAULT_HOP_SECONDS,
    ) -> List[DetectedNote]:
        """
        Build notes from clusters.

        Each note spans from its first frame to the end of its last frame
        (last time + hop). Pitch is the rounded median of the frame pitches,
        confidence the mean frame confidence.

        Args:
            clusters: Time-ordered clusters from TemporalClusterer
            hop_seconds: Analysis hop (see infer_hop_seconds)

        Returns:
            Notes with strictly increasing start times
        """
        stats = SynthesisStats()
        notes: List[DetectedNote] = []

        for cluster in clusters:
            if len(cluster) < self.min_frames_per_note:
                stats.dropped_short_frames += 1
                continue

            start_time = cluster[0].time
            end_time = cluster[-1].time + hop_seconds
            duration = end_time - start_time
            if not math.isfinite(duration) or duration < self.min_note_seconds:
                stats.dropped_short_duration += 1
                continue

            # Equal start times can only come from duplicated timestamps
            if notes and start_time <= notes[-1].start_time:
                stats.dropped_out_of_order += 1
                continue

            pitches = np.array([f.pitch_semitone for f in cluster])
            confidences = np.array([f.confidence for f in cluster])

            notes.append(
                DetectedNote(
                    id=self.id_factory(),
                    start_time=start_time,
                    end_time=end_time,
                    pitch=_round_half_up(float(np.median(pitches))),
                    confidence=float(np.clip(np.mean(confidences), 0.0, 1.0)),
                )
            )

        self.last_stats = stats
        logger.debug(
            "Synthesized %d notes from %d clusters (hop=%.4fs, %s)",
            len(notes),
            len(clusters),
            hop_seconds,
            stats,
        )
        return notes


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
