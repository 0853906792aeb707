from datetime import datetime

import pytest

from backend import settings
from backend.reminders import ReminderScheduler, parse_time, seconds_until
from conftest import FakeClock

NOW = datetime(2024, 5, 15, 17, 30).timestamp()


def test_seconds_until_later_today_and_tomorrow():
    assert seconds_until("18:00", NOW) == 30 * 60
    assert seconds_until("17:30", NOW) == 24 * 3600
    assert seconds_until("07:00", NOW) == 13.5 * 3600


@pytest.mark.parametrize("value", ["", "7", "25:00", "12:60", "ab:cd"])
def test_seconds_until_rejects_bad_times(value):
    with pytest.raises(ValueError):
        seconds_until(value, NOW)


def _scheduler(delivered):
    clock = FakeClock()
    scheduler = ReminderScheduler(
        notify=lambda title, message: delivered.append((title, message)),
        clock=clock,
        now=lambda: NOW,
    )
    return scheduler, clock


def test_schedule_once_fires_and_forgets_handle():
    delivered = []
    scheduler, clock = _scheduler(delivered)
    handle = scheduler.schedule_once(10, "Rest over", "Next set")
    assert handle.timeout == 10
    assert scheduler.handles == [handle]

    clock.fire(handle)
    assert delivered == [("Rest over", "Next set")]
    assert scheduler.handles == []


def test_daily_reminder_reschedules_itself():
    delivered = []
    scheduler, clock = _scheduler(delivered)
    first = scheduler.schedule_daily("18:00", "Workout time", "Go")
    assert first.timeout == 30 * 60

    clock.fire(first)
    assert delivered == [("Workout time", "Go")]
    assert len(scheduler.handles) == 1
    assert scheduler.handles[0] is not first


def test_cancel_all_cancels_every_handle():
    scheduler, clock = _scheduler([])
    scheduler.schedule_once(5, "a", "b")
    scheduler.schedule_daily("18:00", "c", "d")
    scheduler.cancel_all()
    assert scheduler.handles == []
    assert clock.pending() == []


def test_notify_errors_are_logged(caplog):
    def broken(title, message):
        raise RuntimeError("no toast")

    clock = FakeClock()
    scheduler = ReminderScheduler(notify=broken, clock=clock, now=lambda: NOW)
    handle = scheduler.schedule_once(1, "Rest over", "Next set")
    clock.fire(handle)
    assert "Reminder 'Rest over' could not be delivered" in caplog.text


def test_sync_with_settings():
    scheduler, clock = _scheduler([])
    scheduler.sync_with_settings()
    assert scheduler.handles == []

    settings.set_value("reminders_on", True)
    settings.set_value("workout_reminder_time", "07:00")
    scheduler.sync_with_settings()
    assert len(clock.pending()) == 1
    assert clock.pending()[0].timeout == 13.5 * 3600

    settings.set_value("reminders_on", False)
    scheduler.sync_with_settings()
    assert clock.pending() == []


def test_parse_time():
    assert parse_time("7:05") == (7, 5)
    with pytest.raises(ValueError):
        parse_time("24:00")
