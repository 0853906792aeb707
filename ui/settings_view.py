"""Reading and validating the values edited on the settings screen."""

from __future__ import annotations

from backend import settings
from backend.reminders import parse_time
from core import DEFAULT_WEEKLY_TARGET


def current_preferences() -> dict:
    return {
        "reminders_on": bool(settings.get_value("reminders_on", False)),
        "workout_reminder_time": settings.get_value("workout_reminder_time", "18:00"),
        "weekly_target": str(settings.get_value("weekly_target", DEFAULT_WEEKLY_TARGET)),
    }


def apply_preferences(reminders_on: bool, reminder_time: str, weekly_target: str) -> None:
    """Validate the form values and store them.

    Raises :class:`ValueError` with a message fit for the user when a value
    is invalid; nothing is stored in that case.
    """

    reminder_time = (reminder_time or "").strip()
    hour, minute = parse_time(reminder_time)
    try:
        target = int((weekly_target or "").strip())
    except ValueError:
        raise ValueError("Weekly target must be a whole number") from None
    if target < 1:
        raise ValueError("Weekly target must be at least 1")

    settings.set_value("reminders_on", bool(reminders_on))
    settings.set_value("workout_reminder_time", f"{hour:02d}:{minute:02d}")
    settings.set_value("weekly_target", target)
