"""Screens used during an active workout session."""

from .active_session_screen import ActiveSessionScreen
from .workout_summary_screen import WorkoutSummaryScreen

__all__ = [
    "ActiveSessionScreen",
    "WorkoutSummaryScreen",
]
