import sqlite3
from pathlib import Path
import sys
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from backend import settings
from backend.exercise import Exercise
from backend.records import WeeklyStats


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point the settings module at a throwaway file for every test."""
    monkeypatch.setattr(settings, "SETTINGS_PATH", tmp_path / "settings.json")
    settings.reset_cache()
    yield
    settings.reset_cache()


@pytest.fixture
def empty_db(tmp_path: Path) -> Path:
    """Create a temporary database with the schema but no rows."""
    db_path = tmp_path / "workout.db"
    sql_path = Path(__file__).resolve().parent.parent / "data" / "workout_schema.sql"

    conn = sqlite3.connect(db_path)
    with open(sql_path, "r", encoding="utf-8") as fh:
        conn.executescript(fh.read())
    conn.commit()
    conn.close()
    return db_path


@pytest.fixture
def sample_db(empty_db: Path) -> Path:
    """Database populated with a 'Leg Day' plan of three exercises."""
    conn = sqlite3.connect(empty_db)
    conn.execute("INSERT INTO workout_plans (id, user_id, name) VALUES (1, 'u1', 'Leg Day')")
    conn.executemany(
        """
        INSERT INTO plan_exercises
            (plan_id, name, sets, reps, weight, rest_time, notes, muscle_group, position)
        VALUES (1, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [
            ("Squat", 3, "8-10", 80, 90, None, "legs", 0),
            ("Lunge", 2, "10", None, None, "Alternate legs", "legs", 1),
            ("Bench Press", 2, "8", 60, 60, None, "chest", 2),
        ],
    )
    # a deleted plan that must never be served
    conn.execute("INSERT INTO workout_plans (id, name, deleted) VALUES (2, 'Old', 1)")
    conn.commit()
    conn.close()
    return empty_db


def make_exercise(ex_id, sets=1, group=None, rest=None, name=None, weight=None):
    return Exercise(
        id=str(ex_id),
        name=name or str(ex_id),
        sets=sets,
        rest=rest,
        muscle_group=group,
        weight=weight,
    )


class FakePersistence:
    def __init__(self, fail_session=False, fail_exercises=False):
        self.fail_session = fail_session
        self.fail_exercises = fail_exercises
        self.sessions = []
        self.exercises = []

    def save_session(self, session_id, duration_minutes, exercises):
        if self.fail_session:
            raise OSError("database unavailable")
        self.sessions.append((session_id, duration_minutes, list(exercises)))
        return True

    def save_exercise_completion(
        self, session_id, exercise_id, completed_sets, average_weight, reps=None
    ):
        if self.fail_exercises:
            raise OSError("database unavailable")
        self.exercises.append((session_id, exercise_id, completed_sets, average_weight))
        return True


class FakeAggregation:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def on_workout_completed(self, user_id, plan_id, session_id, duration_minutes):
        self.calls.append((user_id, plan_id, session_id, duration_minutes))
        if self.fail:
            raise ConnectionError("aggregation offline")
        return WeeklyStats(weekly_count=2, weekly_target=4, progress=50)


class FakeMotivation:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def get_post_workout_message(self, mood, mood_intensity, workout_name, exercise_count):
        self.calls.append((mood, mood_intensity, workout_name, exercise_count))
        if self.fail:
            raise TimeoutError("motivation timed out")
        return f"Great {workout_name}!"


class FakeClock:
    """Stand-in for ``kivy.clock.Clock`` that fires events on demand."""

    class Event:
        def __init__(self, callback, timeout):
            self.callback = callback
            self.timeout = timeout
            self.cancelled = False

        def cancel(self):
            self.cancelled = True

    def __init__(self):
        self.events = []

    def schedule_once(self, callback, timeout=0):
        event = self.Event(callback, timeout)
        self.events.append(event)
        return event

    def pending(self):
        return [e for e in self.events if not e.cancelled]

    def fire(self, event):
        event.callback(event.timeout)
