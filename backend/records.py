"""Result records produced when a workout session is finalized."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ExerciseSummary:
    exercise_id: str
    name: str
    completed_sets: int
    reps: list[int] = field(default_factory=list)
    average_weight: float | None = None


@dataclass
class LastWorkout:
    timestamp: float
    duration: int | None = None
    workout_name: str | None = None


@dataclass
class WeeklyStats:
    """Roll-up of completed workouts for the current week."""

    weekly_count: int
    weekly_target: int
    progress: int
    last_workout: LastWorkout | None = None


@dataclass
class FinalizedSession:
    """Everything a finished workout hands back to the caller."""

    session_id: str
    plan_id: str
    started_at: float
    ended_at: float
    duration_minutes: int
    exercises: list[ExerciseSummary] = field(default_factory=list)
    weekly_stats: WeeklyStats | None = None
    motivation_message: str | None = None

    @property
    def completion_message(self) -> str:
        """Return the message shown once the workout is saved."""

        if self.motivation_message:
            return self.motivation_message
        return f"You trained for {self.duration_minutes} minutes. Well done!"
