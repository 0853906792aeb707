from __future__ import annotations

import sqlite3
import time
from pathlib import Path

from backend import DEFAULT_DB_PATH
from backend.errors import PlanNotFound
from backend.exercise import Exercise


class PlanStore:
    """Read workout plans from the SQLite database.

    Rows are converted to :class:`Exercise` objects here so the session
    engine never sees raw database values.
    """

    def __init__(self, db_path: Path = DEFAULT_DB_PATH) -> None:
        self.db_path = Path(db_path)

    def _plan_row(self, cursor: sqlite3.Cursor, plan_id) -> tuple:
        cursor.execute(
            "SELECT id, name FROM workout_plans WHERE id = ? AND deleted = 0",
            (plan_id,),
        )
        row = cursor.fetchone()
        if not row:
            raise PlanNotFound(f"Workout plan '{plan_id}' not found")
        return row

    def get_exercises(self, plan_id) -> list[Exercise]:
        """Return the exercises of ``plan_id`` in the order they are performed."""

        with sqlite3.connect(str(self.db_path)) as conn:
            cursor = conn.cursor()
            self._plan_row(cursor, plan_id)
            cursor.execute(
                """
                SELECT id, name, sets, reps, weight, rest_time, notes, muscle_group
                  FROM plan_exercises
                 WHERE plan_id = ? AND deleted = 0
                 ORDER BY position, id
                """,
                (plan_id,),
            )
            rows = cursor.fetchall()

        return [
            Exercise.from_row(
                {
                    "id": ex_id,
                    "name": name,
                    "sets": sets,
                    "reps": reps,
                    "weight": weight,
                    "rest": rest,
                    "notes": notes,
                    "muscle_group": group,
                }
            )
            for ex_id, name, sets, reps, weight, rest, notes, group in rows
        ]

    def get_plan_name(self, plan_id) -> str:
        with sqlite3.connect(str(self.db_path)) as conn:
            return self._plan_row(conn.cursor(), plan_id)[1]

    def list_plans(self, user_id=None) -> list[dict]:
        """Return available plans with their exercise counts.

        When ``user_id`` is given only that user's plans are listed.
        """

        query = """
            SELECT p.id, p.name, COUNT(e.id)
              FROM workout_plans p
              LEFT JOIN plan_exercises e ON e.plan_id = p.id AND e.deleted = 0
             WHERE p.deleted = 0
        """
        params: tuple = ()
        if user_id is not None:
            query += " AND p.user_id = ?"
            params = (user_id,)
        query += " GROUP BY p.id ORDER BY p.id"
        with sqlite3.connect(str(self.db_path)) as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            rows = cursor.fetchall()
        return [
            {"id": plan_id, "name": name, "exercise_count": count}
            for plan_id, name, count in rows
        ]

    def create_plan(self, name: str, exercises: list[dict], user_id=None) -> int:
        """Insert a plan with ``exercises`` and return its id.

        Each exercise dictionary uses the same keys as
        :meth:`Exercise.from_row` (``id`` is assigned by the database).
        """

        if not name.strip():
            raise ValueError("Plan name must not be empty")
        with sqlite3.connect(str(self.db_path)) as conn:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO workout_plans (user_id, name, created_at) VALUES (?, ?, ?)",
                (user_id, name.strip(), time.time()),
            )
            plan_id = cursor.lastrowid
            for position, ex in enumerate(exercises):
                # validate before writing anything odd to the table
                Exercise.from_row({**ex, "id": ex.get("id", position)})
                cursor.execute(
                    """
                    INSERT INTO plan_exercises
                        (plan_id, name, sets, reps, weight, rest_time, notes, muscle_group, position)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        plan_id,
                        ex["name"],
                        ex.get("sets"),
                        ex.get("reps"),
                        ex.get("weight"),
                        ex.get("rest"),
                        ex.get("notes"),
                        ex.get("muscle_group"),
                        position,
                    ),
                )
            conn.commit()
        return plan_id
