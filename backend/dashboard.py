"""Weekly workout roll-up shown on the dashboard."""

from __future__ import annotations

import logging
import sqlite3
import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable

from backend import settings
from backend.records import LastWorkout, WeeklyStats
from core import DEFAULT_DB_PATH, DEFAULT_WEEKLY_TARGET


def week_bounds(timestamp: float) -> tuple[float, float]:
    """Return the Monday 00:00 start and the following Monday for ``timestamp``."""

    day = datetime.fromtimestamp(timestamp)
    monday = (day - timedelta(days=day.weekday())).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    return monday.timestamp(), (monday + timedelta(days=7)).timestamp()


def compute_progress(weekly_count: int, weekly_target: int) -> int:
    """Return the weekly goal completion as a percentage capped at 100."""

    if weekly_target <= 0:
        return 0
    return min(int(weekly_count / weekly_target * 100 + 0.5), 100)


class DashboardService:
    """Compute weekly statistics from completed sessions.

    The most recent result per user is cached; when the database cannot be
    read the cached value (or an empty week) is returned instead.
    """

    def __init__(
        self,
        db_path: Path = DEFAULT_DB_PATH,
        *,
        weekly_target: int | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.db_path = Path(db_path)
        self._weekly_target = weekly_target
        self.clock = clock
        self._cache: dict[object, WeeklyStats] = {}

    @property
    def weekly_target(self) -> int:
        if self._weekly_target is not None:
            return self._weekly_target
        return int(settings.get_value("weekly_target", DEFAULT_WEEKLY_TARGET))

    def fetch_weekly_stats(self, user_id=None) -> WeeklyStats:
        target = self.weekly_target
        start, end = week_bounds(self.clock())
        try:
            with sqlite3.connect(str(self.db_path)) as conn:
                cur = conn.cursor()
                cur.execute(
                    """
                    SELECT COUNT(*) FROM workout_sessions
                     WHERE user_id IS ? AND deleted = 0
                       AND completed_at >= ? AND completed_at < ?
                    """,
                    (user_id, start, end),
                )
                count = cur.fetchone()[0]
                cur.execute(
                    """
                    SELECT s.completed_at, s.duration_minutes,
                           COALESCE(p.name, s.plan_name)
                      FROM workout_sessions s
                      LEFT JOIN workout_plans p ON p.id = s.plan_id
                     WHERE s.user_id IS ? AND s.deleted = 0
                       AND s.completed_at IS NOT NULL
                     ORDER BY s.completed_at DESC
                     LIMIT 1
                    """,
                    (user_id,),
                )
                last = cur.fetchone()
        except sqlite3.Error:
            logging.exception("Could not compute weekly stats for %s", user_id)
            return self._cache.get(
                user_id, WeeklyStats(weekly_count=0, weekly_target=target, progress=0)
            )

        stats = WeeklyStats(
            weekly_count=count,
            weekly_target=target,
            progress=compute_progress(count, target),
            last_workout=LastWorkout(*last) if last else None,
        )
        self._cache[user_id] = stats
        return stats

    def on_workout_completed(
        self, user_id, plan_id, session_id: str, duration_minutes: int
    ) -> WeeklyStats:
        """Record that ``session_id`` finished and return refreshed stats."""

        try:
            with sqlite3.connect(str(self.db_path)) as conn:
                conn.execute(
                    """
                    UPDATE workout_sessions
                       SET user_id = COALESCE(user_id, ?),
                           plan_id = COALESCE(plan_id, ?)
                     WHERE id = ?
                    """,
                    (user_id, plan_id, session_id),
                )
        except sqlite3.Error:
            logging.exception("Could not tag session %s with its owner", session_id)
        stats = self.fetch_weekly_stats(user_id)
        logging.info(
            "Weekly workouts for %s: %d/%d",
            user_id,
            stats.weekly_count,
            stats.weekly_target,
        )
        return stats
