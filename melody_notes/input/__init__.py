"""Input layer - Pitch observation files."""

from .observations import load_observations, save_observations, parse_observations

__all__ = [
    "load_observations",
    "save_observations",
    "parse_observations",
]
