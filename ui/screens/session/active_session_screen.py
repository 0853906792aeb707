from kivymd.app import MDApp
from kivymd.uix.screen import MDScreen
from kivymd.uix.dialog import MDDialog
from kivymd.uix.button import MDFlatButton
from kivymd.toast import toast
from kivy.clock import Clock
from kivy.properties import (
    BooleanProperty,
    ListProperty,
    NumericProperty,
    StringProperty,
)
import logging
import sqlite3

from backend.errors import AlreadyDeferredOnce, PersistenceError, SessionError
from ui import session_view


class ActiveSessionScreen(MDScreen):
    """Screen that walks the user through an active workout.

    The rest countdown is driven by a ``Clock`` interval event owned by this
    screen; it is created when a rest starts and cancelled when the rest
    ends or the screen is left.
    """

    header = StringProperty("")
    exercise_name = StringProperty("")
    exercise_details = StringProperty("")
    exercise_notes = StringProperty("")
    set_label = StringProperty("")
    rest_label = StringProperty("")
    is_resting = BooleanProperty(False)
    overall_progress = NumericProperty(0)
    previous_sets = ListProperty([])
    can_finish = BooleanProperty(False)
    _rest_event = None
    _confirm_dialog = None

    @property
    def session(self):
        app = MDApp.get_running_app()
        return app.workout_session if app else None

    def on_pre_enter(self, *args):
        self.refresh()
        return super().on_pre_enter(*args)

    def on_leave(self, *args):
        self._stop_rest_clock()
        return super().on_leave(*args)

    def refresh(self):
        session = self.session
        if not session:
            return
        exercise = session.current_exercise
        self.header = session_view.exercise_header(session)
        self.exercise_name = exercise.name if exercise else ""
        self.exercise_details = session_view.exercise_details(session)
        self.exercise_notes = (exercise.notes or "") if exercise else ""
        self.set_label = session.next_exercise_display()
        self.previous_sets = session_view.previous_sets(session)
        self.overall_progress = session.overall_progress()
        self.can_finish = session.is_complete()
        self._sync_rest()

    # ------------------------------------------------------------------
    # Rest countdown
    # ------------------------------------------------------------------

    def _sync_rest(self):
        session = self.session
        self.is_resting = bool(session and session.rest_timer.active)
        self.rest_label = session_view.rest_label(session) if session else ""
        if self.is_resting and not self._rest_event:
            self._rest_event = Clock.schedule_interval(self._tick_rest, 1)
        elif not self.is_resting:
            self._stop_rest_clock()

    def _tick_rest(self, dt):
        session = self.session
        if not session or session.closed:
            self._stop_rest_clock()
            return False
        session.tick_rest()
        self._sync_rest()

    def _stop_rest_clock(self):
        if self._rest_event:
            self._rest_event.cancel()
            self._rest_event = None

    def skip_rest(self):
        if self.session:
            self.session.cancel_rest()
        self._sync_rest()

    def add_rest(self, seconds):
        if self.session:
            self.session.adjust_rest(seconds)
        self._sync_rest()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def complete_set(self, weight_text="", reps_text=""):
        session = self.session
        if not session or session.current_exercise is None:
            return
        exercise = session.current_exercise
        try:
            weight, reps = session_view.parse_set_input(weight_text, reps_text, exercise)
            session.complete_set(exercise.id, weight, reps)
        except ValueError:
            toast("Enter a valid weight and number of reps")
            return
        except SessionError as exc:
            toast(str(exc))
            return
        self.refresh()

    def skip_exercise(self):
        session = self.session
        if not session:
            return
        try:
            session.defer_current_exercise()
        except AlreadyDeferredOnce as exc:
            self._ask_ignore(exc.exercise)
            return
        except SessionError as exc:
            toast(str(exc))
            return
        self.refresh()

    def _ask_ignore(self, exercise):
        def _answer(ignore):
            def _handler(*_):
                self._confirm_dialog.dismiss()
                try:
                    self.session.defer_current_exercise(ignore_permanently=ignore)
                except SessionError as exc:
                    toast(str(exc))
                    return
                self.refresh()

            return _handler

        self._confirm_dialog = MDDialog(
            text=(
                f"You already skipped {exercise.name}. "
                "Ignore it for the rest of this workout?"
            ),
            buttons=[
                MDFlatButton(text="Skip for now", on_release=_answer(False)),
                MDFlatButton(text="Ignore", on_release=_answer(True)),
            ],
        )
        self._confirm_dialog.open()

    def finish_workout(self):
        app = MDApp.get_running_app()
        session = self.session
        if not session:
            return
        try:
            record = session.finalize(
                mood=getattr(app, "mood", None),
                mood_intensity=getattr(app, "mood_intensity", None),
            )
        except PersistenceError:
            logging.exception("Workout could not be saved")
            toast("Could not save the workout. Please try again.")
            return
        self._stop_rest_clock()
        if record.motivation_message and getattr(app, "session_store", None):
            try:
                app.session_store.save_post_workout_message(
                    record.session_id, record.motivation_message
                )
            except Exception:
                logging.exception("Post-workout message not stored")
        app.last_result = record
        if self.manager:
            self.manager.current = "workout_summary"

    def cancel_workout(self):
        app = MDApp.get_running_app()
        session = self.session
        if session:
            try:
                session_view.discard_session(session, getattr(app, "session_store", None))
            except sqlite3.Error:
                logging.exception("Cancelled workout %s not removed", session.session_id)
        self._stop_rest_clock()
        app.workout_session = None
        if self.manager:
            self.manager.current = "plans"
