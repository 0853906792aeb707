"""Exceptions raised by the workout session engine and its stores.

Every engine error is raised before any state is touched, so catching one
leaves the session exactly as it was.
"""

from __future__ import annotations


class SessionError(Exception):
    """Base class for errors reported by :class:`WorkoutSession`."""


class SessionClosed(SessionError):
    """The session was finalized or cancelled."""

    def __init__(self, message: str = "Workout session is closed") -> None:
        super().__init__(message)


class SessionAlreadyClosed(SessionClosed):
    """``finalize`` was called on a session that is no longer open."""

    def __init__(self, message: str = "Workout session was already finalized") -> None:
        super().__init__(message)


class ExerciseNotCurrent(SessionError):
    """A set was recorded for an exercise other than the current one."""

    def __init__(self, exercise_id, current_id) -> None:
        super().__init__(
            f"Exercise '{exercise_id}' is not the current exercise ('{current_id}')"
        )
        self.exercise_id = exercise_id
        self.current_id = current_id


class ExerciseAlreadyComplete(SessionError):
    """All target sets of the exercise are already recorded."""

    def __init__(self, exercise_id) -> None:
        super().__init__(f"Exercise '{exercise_id}' is already complete")
        self.exercise_id = exercise_id


class AlreadyDeferredOnce(SessionError):
    """The current exercise was skipped before.

    Callers should ask the user whether to ignore the exercise for the rest
    of the workout and call ``defer_current_exercise`` again with their
    answer.
    """

    def __init__(self, exercise) -> None:
        super().__init__(f"Exercise '{exercise.name}' was already skipped once")
        self.exercise = exercise


class PersistenceError(SessionError):
    """The session record could not be written; the session stays open."""


class PlanNotFound(LookupError):
    """The requested workout plan does not exist."""
