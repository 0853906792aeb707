"""UI screen modules for the workout app."""

from .history_screen import WorkoutHistoryScreen
from .plans_screen import PlansScreen
from .session import ActiveSessionScreen, WorkoutSummaryScreen
from .settings_screen import SettingsScreen

__all__ = [
    "ActiveSessionScreen",
    "PlansScreen",
    "SettingsScreen",
    "WorkoutHistoryScreen",
    "WorkoutSummaryScreen",
]
