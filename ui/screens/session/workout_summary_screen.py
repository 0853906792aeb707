from kivymd.app import MDApp
from kivymd.uix.screen import MDScreen
from kivymd.uix.list import OneLineListItem
from kivy.properties import ObjectProperty, StringProperty

from ui import session_view


class WorkoutSummaryScreen(MDScreen):
    """Screen showing the summary of a completed workout."""

    summary_list = ObjectProperty(None)
    message = StringProperty("")

    def on_pre_enter(self, *args):
        self.populate()
        return super().on_pre_enter(*args)

    def populate(self):
        app = MDApp.get_running_app()
        record = getattr(app, "last_result", None)
        if not record:
            return
        self.message = record.completion_message
        if not self.summary_list:
            return
        self.summary_list.clear_widgets()
        for line in session_view.summary_lines(record):
            self.summary_list.add_widget(OneLineListItem(text=line))

    def done(self):
        app = MDApp.get_running_app()
        app.workout_session = None
        if self.manager:
            self.manager.current = "plans"
