"""SQLite persistence for performed workout sessions.

:class:`SessionStore` implements the persistence side of
:meth:`backend.workout_session.WorkoutSession.finalize`: one session record
and one row per exercise that had at least one set recorded.  It also
serves the history views.
"""

from __future__ import annotations

import sqlite3
import time
from pathlib import Path
from typing import Callable

from core import DEFAULT_DB_PATH
from backend.records import ExerciseSummary


class SessionStore:
    def __init__(
        self,
        db_path: Path = DEFAULT_DB_PATH,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.db_path = Path(db_path)
        self.clock = clock
        # exercise names announced by save_session, keyed by session id
        self._exercise_names: dict[str, dict[str, str]] = {}

    def create_session(
        self,
        session_id: str,
        plan_id,
        *,
        user_id=None,
        plan_name: str = "",
        started_at: float | None = None,
        mood: str | None = None,
        mood_intensity: int | None = None,
    ) -> None:
        """Insert the row for a workout that has just started."""

        with sqlite3.connect(str(self.db_path)) as conn:
            conn.execute(
                """
                INSERT INTO workout_sessions
                    (id, user_id, plan_id, plan_name, started_at, mood, mood_intensity)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    session_id,
                    user_id,
                    plan_id,
                    plan_name,
                    self.clock() if started_at is None else started_at,
                    mood,
                    mood_intensity,
                ),
            )

    def save_session(
        self,
        session_id: str,
        duration_minutes: int,
        exercises: list[ExerciseSummary],
    ) -> bool:
        """Mark ``session_id`` as completed.

        A row is created when the session was never registered with
        :meth:`create_session`.  The per-exercise rows are written separately
        by :meth:`save_exercise_completion`; the names in ``exercises`` are
        kept so those rows can be labelled.
        """

        self._exercise_names[session_id] = {
            str(summary.exercise_id): summary.name for summary in exercises
        }
        completed_at = self.clock()
        with sqlite3.connect(str(self.db_path)) as conn:
            conn.execute(
                """
                INSERT INTO workout_sessions (id, started_at, completed_at, duration_minutes)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    completed_at = excluded.completed_at,
                    duration_minutes = excluded.duration_minutes
                """,
                (
                    session_id,
                    completed_at - duration_minutes * 60,
                    completed_at,
                    duration_minutes,
                ),
            )
        return True

    def save_exercise_completion(
        self,
        session_id: str,
        exercise_id: str,
        completed_sets: int,
        average_weight: float | None,
        reps: list[int] | None = None,
        exercise_name: str | None = None,
    ) -> bool:
        if exercise_name is None:
            exercise_name = self._exercise_names.get(session_id, {}).get(str(exercise_id))
        with sqlite3.connect(str(self.db_path)) as conn:
            conn.execute(
                """
                INSERT INTO exercise_sessions
                    (workout_session_id, exercise_id, exercise_name,
                     sets_completed, reps_completed, weight_used)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    session_id,
                    str(exercise_id),
                    exercise_name,
                    completed_sets,
                    ",".join(str(r) for r in reps or []),
                    average_weight,
                ),
            )
        return True

    def save_post_workout_message(self, session_id: str, message: str) -> None:
        with sqlite3.connect(str(self.db_path)) as conn:
            conn.execute(
                "UPDATE workout_sessions SET post_workout_message = ? WHERE id = ?",
                (message, session_id),
            )

    def delete_session(self, session_id: str) -> None:
        """Remove ``session_id`` and its exercise rows.

        Used when a workout is cancelled so nothing of it is kept.
        """

        self._exercise_names.pop(session_id, None)
        with sqlite3.connect(str(self.db_path)) as conn:
            conn.execute(
                "DELETE FROM exercise_sessions WHERE workout_session_id = ?",
                (session_id,),
            )
            conn.execute("DELETE FROM workout_sessions WHERE id = ?", (session_id,))

    def get_session_history(self, limit: int | None = None, user_id=None) -> list[dict]:
        """Return completed sessions, most recent first.

        Each item contains ``id``, ``plan_name``, ``completed_at`` and
        ``duration_minutes``.  When ``limit`` is provided only that many
        sessions are returned.
        """

        query = (
            "SELECT id, plan_name, completed_at, duration_minutes FROM workout_sessions "
            "WHERE deleted = 0 AND completed_at IS NOT NULL"
        )
        params: list = []
        if user_id is not None:
            query += " AND user_id = ?"
            params.append(user_id)
        query += " ORDER BY completed_at DESC"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)
        with sqlite3.connect(str(self.db_path)) as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            rows = cursor.fetchall()
        return [
            {
                "id": sid,
                "plan_name": name,
                "completed_at": completed,
                "duration_minutes": duration,
            }
            for sid, name, completed, duration in rows
        ]

    def get_session_details(self, session_id: str) -> dict:
        """Return the stored record for ``session_id`` with its exercises.

        An empty ``dict`` is returned when the session does not exist.
        """

        with sqlite3.connect(str(self.db_path)) as conn:
            cur = conn.cursor()
            cur.execute(
                """
                SELECT plan_name, started_at, completed_at, duration_minutes,
                       mood, mood_intensity, post_workout_message
                  FROM workout_sessions
                 WHERE id = ? AND deleted = 0
                """,
                (session_id,),
            )
            row = cur.fetchone()
            if row is None:
                return {}
            cur.execute(
                """
                SELECT exercise_id, exercise_name, sets_completed, reps_completed, weight_used
                  FROM exercise_sessions
                 WHERE workout_session_id = ? AND deleted = 0
                 ORDER BY id
                """,
                (session_id,),
            )
            exercises = [
                {
                    "exercise_id": ex_id,
                    "name": name,
                    "sets": sets,
                    "reps": [int(r) for r in reps.split(",")] if reps else [],
                    "weight": weight,
                }
                for ex_id, name, sets, reps, weight in cur.fetchall()
            ]

        plan_name, started, completed, duration, mood, intensity, message = row
        return {
            "id": session_id,
            "plan_name": plan_name,
            "started_at": started,
            "completed_at": completed,
            "duration_minutes": duration,
            "mood": mood,
            "mood_intensity": intensity,
            "post_workout_message": message,
            "exercises": exercises,
        }
