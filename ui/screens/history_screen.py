from kivymd.app import MDApp
from kivymd.uix.screen import MDScreen
from kivymd.uix.dialog import MDDialog
from kivymd.uix.list import TwoLineListItem
from kivy.properties import ObjectProperty, StringProperty

from ui import session_view


class WorkoutHistoryScreen(MDScreen):
    """Display a list of past workouts and open their details.

    Attributes:
        return_to (str): Name of the screen to return to when the Back
            button is pressed. Defaults to ``"plans"``.
    """

    history_list = ObjectProperty(None)
    return_to = StringProperty("plans")
    _details_dialog = None

    def on_pre_enter(self, *args):
        """Populate the history list before the screen becomes visible."""
        self.populate()
        return super().on_pre_enter(*args)

    def populate(self) -> None:
        """Fill the history list with completed workout sessions."""
        app = MDApp.get_running_app()
        if not self.history_list:
            return
        self.history_list.clear_widgets()
        for entry in app.session_store.get_session_history(user_id=app.user_id):
            item = TwoLineListItem(
                text=entry["plan_name"] or "Workout",
                secondary_text=session_view.history_secondary_text(entry),
                on_release=lambda _, sid=entry["id"]: self.open_session(sid),
            )
            self.history_list.add_widget(item)

    def open_session(self, session_id: str) -> None:
        """Show the stored details of ``session_id`` in a dialog."""
        app = MDApp.get_running_app()
        details = app.session_store.get_session_details(session_id)
        self._details_dialog = MDDialog(
            title=details.get("plan_name") or "Workout",
            text="\n".join(session_view.session_detail_lines(details)),
        )
        self._details_dialog.open()

    def go_back(self) -> None:
        if self.manager:
            self.manager.current = self.return_to
