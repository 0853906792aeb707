from __future__ import annotations

from pathlib import Path

# Number of sets an exercise defaults to when the plan row leaves it empty
DEFAULT_SETS_PER_EXERCISE = 3

# Default path to the bundled SQLite database
DEFAULT_DB_PATH = Path(__file__).resolve().parent / "data" / "workout.db"

# Schema used to create a fresh database
SCHEMA_PATH = Path(__file__).resolve().parent / "data" / "workout_schema.sql"

# Group key used for exercises without a muscle-group tag
UNGROUPED = "ungrouped"

# Completed workouts per week the dashboard aims for
DEFAULT_WEEKLY_TARGET = 4

# Moods a user can pick before a workout, mapped to their default intensity
MOOD_INTENSITIES = {
    "energized": 5,
    "good": 4,
    "neutral": 3,
    "tired": 2,
    "unmotivated": 1,
}


def round_minutes(seconds: float) -> int:
    """Return ``seconds`` as whole minutes, rounding halves up."""

    return int(seconds / 60 + 0.5)


def format_clock(seconds: int) -> str:
    """Return ``seconds`` formatted as ``MM:SS``."""

    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"
