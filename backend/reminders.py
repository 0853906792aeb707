"""Workout reminders driven by cancellable clock events.

Every event the scheduler creates is kept in :attr:`ReminderScheduler.handles`
and cancelled by :meth:`ReminderScheduler.cancel_all`, so reminders live
exactly as long as the component that owns the scheduler.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta
from typing import Callable

from backend import settings


def parse_time(hhmm: str) -> tuple[int, int]:
    """Return ``(hour, minute)`` for an ``HH:MM`` string."""

    try:
        hour, minute = (int(part) for part in hhmm.split(":"))
    except ValueError as exc:
        raise ValueError(f"Invalid reminder time '{hhmm}'") from exc
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise ValueError(f"Invalid reminder time '{hhmm}'")
    return hour, minute


def seconds_until(hhmm: str, now: float) -> float:
    """Return seconds from ``now`` until the next local ``HH:MM``."""

    hour, minute = parse_time(hhmm)
    current = datetime.fromtimestamp(now)
    target = current.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if target <= current:
        target += timedelta(days=1)
    return (target - current).total_seconds()


class ReminderScheduler:
    """Schedule reminder callbacks on a Kivy-style clock.

    ``clock`` needs ``schedule_once(callback, timeout)`` returning an event
    with ``cancel()``; it defaults to :data:`kivy.clock.Clock`.
    ``notify(title, message)`` is called when a reminder fires.
    """

    def __init__(
        self,
        notify: Callable[[str, str], None],
        clock=None,
        now: Callable[[], float] = time.time,
    ) -> None:
        if clock is None:
            from kivy.clock import Clock

            clock = Clock
        self.clock = clock
        self.notify = notify
        self.now = now
        self.handles: list = []

    def schedule_once(self, delay: float, title: str, message: str):
        """Fire a reminder after ``delay`` seconds and return its handle."""

        handle = None

        def _fire(dt):
            if handle in self.handles:
                self.handles.remove(handle)
            self._deliver(title, message)

        handle = self.clock.schedule_once(_fire, delay)
        self.handles.append(handle)
        return handle

    def schedule_daily(self, hhmm: str, title: str, message: str):
        """Fire a reminder every day at ``hhmm`` local time."""

        handle = None

        def _fire(dt):
            nonlocal handle
            if handle in self.handles:
                self.handles.remove(handle)
            self._deliver(title, message)
            handle = self.clock.schedule_once(
                _fire, seconds_until(hhmm, self.now())
            )
            self.handles.append(handle)

        handle = self.clock.schedule_once(_fire, seconds_until(hhmm, self.now()))
        self.handles.append(handle)
        return handle

    def _deliver(self, title: str, message: str) -> None:
        try:
            self.notify(title, message)
        except Exception:
            logging.exception("Reminder '%s' could not be delivered", title)

    def cancel_all(self) -> None:
        for handle in self.handles:
            handle.cancel()
        self.handles.clear()

    def sync_with_settings(self) -> None:
        """Replace scheduled reminders with the ones enabled in settings."""

        self.cancel_all()
        if not settings.get_value("reminders_on", False):
            return
        hhmm = settings.get_value("workout_reminder_time", "18:00")
        self.schedule_daily(hhmm, "Workout time", "Your workout is waiting for you.")
        logging.info("Workout reminder scheduled daily at %s", hhmm)
