from kivymd.app import MDApp
from kivymd.toast import toast
from kivy.lang import Builder
from pathlib import Path
import logging

from core import DEFAULT_DB_PATH, MOOD_INTENSITIES
from backend.db_io import ensure_database
from backend.dashboard import DashboardService
from backend.errors import PlanNotFound
from backend.motivation import MotivationService
from backend.plans import PlanStore
from backend.reminders import ReminderScheduler
from backend.sessions import SessionStore
from backend.workout_session import WorkoutSession

# Registers the screen classes used by main.kv
from ui.screens import (  # noqa: F401
    ActiveSessionScreen,
    PlansScreen,
    SettingsScreen,
    WorkoutHistoryScreen,
    WorkoutSummaryScreen,
)


# Plan created on first launch so the app has something to run
SAMPLE_PLAN = [
    {"name": "Squat", "sets": 3, "reps": "8-10", "weight": 60, "rest": 90, "muscle_group": "legs"},
    {"name": "Lunge", "sets": 3, "reps": "10-12", "rest": 60, "muscle_group": "legs"},
    {"name": "Bench Press", "sets": 3, "reps": "8-10", "weight": 50, "rest": 90, "muscle_group": "chest"},
    {"name": "Push-up", "sets": 2, "reps": "12-15", "rest": 45, "muscle_group": "chest"},
    {"name": "Plank", "sets": 2, "reps": "45s", "notes": "Keep hips level"},
]


class WorkoutApp(MDApp):
    workout_session: WorkoutSession | None = None
    last_result = None
    user_id = None
    mood: str | None = None
    mood_intensity: int | None = None

    def __init__(self, db_path: Path = DEFAULT_DB_PATH, **kwargs):
        super().__init__(**kwargs)
        self.db_path = ensure_database(db_path)
        self.plan_store = PlanStore(self.db_path)
        self.session_store = SessionStore(self.db_path)
        self.dashboard = DashboardService(self.db_path)
        self.motivation = MotivationService()
        self.reminders = ReminderScheduler(notify=lambda title, message: toast(message))
        if not self.plan_store.list_plans():
            self.plan_store.create_plan("Full Body", SAMPLE_PLAN)

    def build(self):
        return Builder.load_file(str(Path(__file__).with_name("main.kv")))

    def on_start(self):
        self.reminders.sync_with_settings()

    def on_stop(self):
        self.reminders.cancel_all()

    def start_workout(self, plan_id, mood: str | None = None):
        """Open a :class:`WorkoutSession` for ``plan_id``.

        The plan is read once here; no database access happens while the
        workout is in progress until it is finalized.
        """

        try:
            session = WorkoutSession.start(
                self.plan_store,
                plan_id,
                user_id=self.user_id,
                persistence=self.session_store,
                aggregation=self.dashboard,
                motivation=self.motivation,
            )
        except PlanNotFound:
            logging.exception("Plan %s could not be loaded", plan_id)
            toast("This workout plan is no longer available")
            self.workout_session = None
            return
        self.mood = mood
        self.mood_intensity = MOOD_INTENSITIES.get(mood) if mood else None
        self.session_store.create_session(
            session.session_id,
            plan_id,
            user_id=self.user_id,
            plan_name=session.plan_name,
            started_at=session.start_time,
            mood=mood,
            mood_intensity=self.mood_intensity,
        )
        self.workout_session = session


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    WorkoutApp().run()
