from kivymd.app import MDApp
from kivymd.uix.screen import MDScreen
from kivymd.toast import toast
from kivy.properties import StringProperty
import logging

from ui import settings_view


class SettingsScreen(MDScreen):
    """Display and persist reminder and weekly goal settings."""

    return_to = StringProperty("plans")
    """Name of the screen to return to when leaving settings."""

    def on_pre_enter(self, *args) -> None:
        """Populate controls from stored settings."""
        prefs = settings_view.current_preferences()
        self.ids.reminders_switch.active = prefs["reminders_on"]
        self.ids.reminder_time_field.text = prefs["workout_reminder_time"]
        self.ids.weekly_target_field.text = prefs["weekly_target"]
        return super().on_pre_enter(*args)

    def save(self) -> None:
        """Store the form values and reschedule reminders."""
        try:
            settings_view.apply_preferences(
                self.ids.reminders_switch.active,
                self.ids.reminder_time_field.text,
                self.ids.weekly_target_field.text,
            )
        except ValueError as exc:
            toast(str(exc))
            return
        except OSError:
            logging.exception("Settings could not be saved")
            toast("Settings could not be saved")
            return
        MDApp.get_running_app().reminders.sync_with_settings()
        toast("Settings saved")
        if self.manager:
            self.manager.current = self.return_to
