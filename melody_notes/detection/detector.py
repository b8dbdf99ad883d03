"""Note detection pipeline - observations in, note events out.

FrameFilter -> TemporalClusterer -> NoteSynthesizer. The detector holds only
its configuration; every call starts from scratch.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from ..core import PitchObservation, DetectedNote
from .config import DetectionConfig
from .frame_filter import FrameFilter
from .clustering import TemporalClusterer
from .synthesis import NoteSynthesizer, infer_hop_seconds

logger = logging.getLogger(__name__)


@dataclass
class DetectionStats:
    """Statistics from one detection run."""

    input_frames: int = 0
    voiced_frames: int = 0
    clusters: int = 0
    dropped_short_frames: int = 0
    dropped_short_duration: int = 0
    dropped_out_of_order: int = 0
    notes: int = 0
    hop_seconds: float = 0.0

    @property
    def dropped_clusters(self) -> int:
        """Clusters that did not become notes."""
        return self.clusters - self.notes

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class NoteDetector:
    """Detect discrete notes from a frame-by-frame pitch estimate."""

    def __init__(
        self,
        config: Optional[DetectionConfig] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        """
        Initialize NoteDetector.

        Args:
            config: Detection thresholds (defaults when None)
            id_factory: Callable producing unique note ids (default: uuid4 strings)
        """
        self.config = config or DetectionConfig()
        self.id_factory = id_factory

    def detect(
        self,
        observations: Iterable[PitchObservation],
        return_stats: bool = False,
    ) -> Union[List[DetectedNote], Tuple[List[DetectedNote], DetectionStats]]:
        """
        Run the detection pipeline.

        Args:
            observations: Pitch observations in time order
            return_stats: Whether to return detection statistics

        Returns:
            Detected notes, optionally with statistics
        """
        cfg = self.config
        observations = list(observations)
        stats = DetectionStats(input_frames=len(observations))

        frames = FrameFilter(min_confidence=cfg.min_confidence).filter(observations)
        stats.voiced_frames = len(frames)

        if not frames:
            logger.debug("No voiced frames in %d observations", len(observations))
            if return_stats:
                return [], stats
            return []

        hop_seconds = infer_hop_seconds([f.time for f in frames])
        stats.hop_seconds = hop_seconds

        clusterer = TemporalClusterer(
            max_gap_seconds=cfg.max_gap_seconds,
            max_jump_semitones=cfg.max_jump_semitones,
            max_stddev_semitones=cfg.max_stddev_semitones,
        )
        clusters = clusterer.cluster(frames)
        stats.clusters = len(clusters)

        synthesizer = NoteSynthesizer(
            min_frames_per_note=cfg.min_frames_per_note,
            min_note_seconds=cfg.min_note_seconds,
            id_factory=self.id_factory,
        )
        notes = synthesizer.synthesize(clusters, hop_seconds)

        stats.dropped_short_frames = synthesizer.last_stats.dropped_short_frames
        stats.dropped_short_duration = synthesizer.last_stats.dropped_short_duration
        stats.dropped_out_of_order = synthesizer.last_stats.dropped_out_of_order
        stats.notes = len(notes)

        logger.debug(
            "Detected %d notes: %d/%d frames voiced, %d clusters",
            stats.notes,
            stats.voiced_frames,
            stats.input_frames,
            stats.clusters,
        )

        if return_stats:
            return notes, stats
        return notes


def detect_notes(
    observations: Iterable[PitchObservation],
    config: Optional[DetectionConfig] = None,
    **overrides: Any,
) -> List[DetectedNote]:
    """
    Detect notes with the given config, overriding individual fields.

    Example:
        notes = detect_notes(observations, min_confidence=0.5)
    """
    config = (config or DetectionConfig()).replace(**overrides)
    return NoteDetector(config).detect(observations)
