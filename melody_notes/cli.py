"""Command-line interface for melody-notes.

Provides commands for:
- detect: Segment a pitch observation file into notes
- snap: Snap a single MIDI pitch to a key
- demo: Run detection on a synthetic melody
- scales: List the available scales
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .core import PitchObservation, pitch_name

app = typer.Typer(
    name="melody-notes",
    help="Pitch-frame to note segmentation and scale quantization",
    rich_markup_mode="markdown",
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    """Route library debug logs through rich when --verbose is set."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path], **overrides):
    """Build a DetectionConfig from an optional JSON file plus CLI overrides."""
    from .detection import DetectionConfig

    if config_file is None:
        config = DetectionConfig()
    else:
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
        with open(config_file, "r", encoding="utf-8") as f:
            config = DetectionConfig.from_dict(json.load(f))

    return config.replace(**overrides)


def _parse_key(key: Optional[str]):
    from .processing import parse_key

    return parse_key(key) if key else None


def _run_detection(observations: List[PitchObservation], config, key):
    """Detect notes and adapt them to segments; returns (segments, stats)."""
    from .detection import NoteDetector
    from .output import NoteModelAdapter

    detector = NoteDetector(config)
    notes, stats = detector.detect(observations, return_stats=True)
    segments = NoteModelAdapter(key=key).to_segments(notes)
    return segments, stats


def _track_duration(observations: List[PitchObservation], hop_seconds: float) -> float:
    if not observations:
        return 0.0
    return max(obs.time for obs in observations) + hop_seconds


@app.command()
def detect(
    observations_file: Path = typer.Argument(
        ..., help="Pitch observation file (JSON or CREPE-style CSV)"
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Output note track JSON path"
    ),
    midi: Optional[Path] = typer.Option(
        None, "--midi", help="Also export the notes as a MIDI file"
    ),
    key: Optional[str] = typer.Option(
        None, "-k", "--key", help="Snap notes to a key, e.g. 'C major' or 'F# minor'"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Detection config JSON file"
    ),
    min_confidence: Optional[float] = typer.Option(
        None, "--min-confidence", help="Minimum frame confidence (0-1)"
    ),
    max_gap: Optional[float] = typer.Option(
        None, "--max-gap", help="Maximum gap between frames of one note (seconds)"
    ),
    max_jump: Optional[float] = typer.Option(
        None, "--max-jump", help="Maximum pitch jump between frames (semitones)"
    ),
    max_stddev: Optional[float] = typer.Option(
        None, "--max-stddev", help="Maximum pitch spread within a note (semitones)"
    ),
    min_frames: Optional[int] = typer.Option(
        None, "--min-frames", help="Minimum frames per note"
    ),
    min_duration: Optional[float] = typer.Option(
        None, "--min-duration", help="Minimum note duration in seconds"
    ),
    sample_rate: int = typer.Option(
        44100, "--sample-rate", help="Sample rate recorded in the note track"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output"),
):
    """Detect notes in a pitch observation file.

    **Examples:**

        melody-notes detect vocals.f0.csv

        melody-notes detect frames.json -k "A minor" --midi vocals.mid
    """
    from .input import load_observations
    from .output import NoteTrack, MIDIExporter

    _setup_logging(verbose)

    try:
        config = _load_config(
            config_file,
            min_confidence=min_confidence,
            max_gap_seconds=max_gap,
            max_jump_semitones=max_jump,
            max_stddev_semitones=max_stddev,
            min_frames_per_note=min_frames,
            min_note_seconds=min_duration,
        )
        musical_key = _parse_key(key)
        observations = load_observations(observations_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if output is None:
        output = observations_file.with_suffix(".notes.json")

    if not json_output:
        console.print(f"[blue]Loaded:[/blue] {observations_file} ({len(observations)} frames)")
        console.print("[blue]Detecting notes...[/blue]")

    segments, stats = _run_detection(observations, config, musical_key)

    track = NoteTrack(
        sample_rate=sample_rate,
        duration=_track_duration(observations, stats.hop_seconds),
        notes=segments,
    )

    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "w", encoding="utf-8") as f:
        json.dump(track.to_dict(), f, indent=2)

    if midi is not None:
        MIDIExporter().export(segments, str(midi))

    if json_output:
        result = {
            "input": str(observations_file),
            "output": str(output),
            "notes_count": len(segments),
            "key": musical_key.name if musical_key else None,
            "config": config.to_dict(),
            "stats": stats.to_dict(),
        }
        if midi is not None:
            result["midi"] = str(midi)
        console.print_json(data=result)
        return

    console.print(
        f"  Voiced frames: {stats.voiced_frames}/{stats.input_frames}, "
        f"clusters: {stats.clusters}, hop: {stats.hop_seconds * 1000:.1f}ms"
    )
    console.print(f"  Detected {len(segments)} notes")
    if segments:
        _show_notes_table(segments)
    console.print(f"[blue]Saved note track:[/blue] {output}")
    if midi is not None:
        console.print(f"[blue]Saved MIDI:[/blue] {midi}")


@app.command()
def snap(
    pitch: int = typer.Argument(..., help="MIDI pitch to snap"),
    key: str = typer.Option(..., "-k", "--key", help="Key, e.g. 'C major'"),
):
    """Snap a MIDI pitch to the nearest tone of a key."""
    from .processing import snap_to_scale

    try:
        musical_key = _parse_key(key)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    snapped = snap_to_scale(pitch, musical_key)
    console.print(
        f"{pitch} ({pitch_name(pitch)}) -> {snapped} ({pitch_name(snapped)}) "
        f"in {musical_key.name}"
    )


@app.command()
def demo(
    duration: float = typer.Option(3.15, "-d", "--duration", help="Seconds of synthetic melody"),
    key: Optional[str] = typer.Option(None, "-k", "--key", help="Snap notes to a key"),
    json_output: bool = typer.Option(False, "--json", help="Output notes as JSON"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output"),
):
    """Run note detection on a synthetic stepped-scale melody."""
    from .analysis import SyntheticPitchEstimator
    from .detection import DetectionConfig

    _setup_logging(verbose)

    try:
        musical_key = _parse_key(key)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    observations = SyntheticPitchEstimator().estimate(duration)
    segments, stats = _run_detection(observations, DetectionConfig(), musical_key)

    if json_output:
        console.print_json(
            data={
                "notes_count": len(segments),
                "notes": [s.to_dict() for s in segments],
            }
        )
        return

    console.print(f"[blue]Synthetic melody:[/blue] {len(observations)} frames")
    console.print(f"  Detected {len(segments)} notes")
    if segments:
        _show_notes_table(segments)


@app.command()
def scales():
    """List the available scales."""
    from .processing import SCALES

    table = Table(title="Scales")
    table.add_column("Name", style="cyan")
    table.add_column("Degrees", style="green")
    table.add_column("Notes (C root)", style="yellow")

    for name, degrees in SCALES.items():
        table.add_row(
            name,
            " ".join(str(d) for d in degrees),
            " ".join(pitch_name(60 + d)[:-1] for d in degrees),
        )

    console.print(table)


def _show_notes_table(segments):
    """Display note segments in a table."""
    table = Table(title="Detected Notes")
    table.add_column("#", style="dim")
    table.add_column("Note", style="cyan")
    table.add_column("Snapped", style="green")
    table.add_column("Time", style="yellow")
    table.add_column("Confidence", style="magenta")

    for i, seg in enumerate(segments, 1):
        snapped = seg.snapped_semitone
        table.add_row(
            str(i),
            f"{seg.pitch_name} ({seg.base_semitone})",
            pitch_name(snapped) if snapped is not None else "-",
            f"{seg.start_time:.2f}-{seg.end_time:.2f}s",
            f"{seg.confidence:.2f}" if seg.confidence is not None else "-",
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
