from kivymd.app import MDApp
from kivymd.uix.screen import MDScreen
from kivymd.uix.dialog import MDDialog
from kivymd.uix.list import OneLineListItem, TwoLineListItem
from kivy.properties import ObjectProperty, StringProperty

from core import MOOD_INTENSITIES


class PlansScreen(MDScreen):
    """Screen to pick a workout plan and the mood it is started in."""

    plan_list = ObjectProperty(None)
    stats_label = StringProperty("")
    _mood_dialog = None

    def on_pre_enter(self, *args):
        self.populate()
        return super().on_pre_enter(*args)

    def populate(self):
        app = MDApp.get_running_app()
        stats = app.dashboard.fetch_weekly_stats(app.user_id)
        self.stats_label = (
            f"{stats.weekly_count}/{stats.weekly_target} workouts this week"
        )
        if not self.plan_list:
            return
        self.plan_list.clear_widgets()
        for plan in app.plan_store.list_plans():
            item = TwoLineListItem(
                text=plan["name"],
                secondary_text=f"{plan['exercise_count']} exercises",
            )
            item.bind(on_release=lambda inst, plan_id=plan["id"]: self.choose_mood(plan_id))
            self.plan_list.add_widget(item)

    def choose_mood(self, plan_id):
        """Ask how the user feels, then start ``plan_id``."""

        def _pick(mood):
            def _handler(*_):
                self._mood_dialog.dismiss()
                self.start(plan_id, mood)

            return _handler

        items = [
            OneLineListItem(text=mood.capitalize(), on_release=_pick(mood))
            for mood in MOOD_INTENSITIES
        ]
        self._mood_dialog = MDDialog(
            title="How are you feeling?", type="simple", items=items
        )
        self._mood_dialog.open()

    def start(self, plan_id, mood=None):
        app = MDApp.get_running_app()
        app.start_workout(plan_id, mood=mood)
        if self.manager and app.workout_session:
            self.manager.current = "active_session"
