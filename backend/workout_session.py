from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Iterable, Protocol

from backend.errors import (
    AlreadyDeferredOnce,
    ExerciseAlreadyComplete,
    ExerciseNotCurrent,
    PersistenceError,
    SessionAlreadyClosed,
    SessionClosed,
    SessionError,
)
from backend.exercise import Exercise
from backend.records import ExerciseSummary, FinalizedSession, WeeklyStats
from backend.rest_timer import RestTimer
from core import MOOD_INTENSITIES, round_minutes


class PlanStore(Protocol):
    def get_exercises(self, plan_id) -> list[Exercise]: ...


class SessionPersistence(Protocol):
    def save_session(
        self, session_id: str, duration_minutes: int, exercises: list[ExerciseSummary]
    ): ...

    def save_exercise_completion(
        self,
        session_id: str,
        exercise_id: str,
        completed_sets: int,
        average_weight: float | None,
        reps: list[int] | None = None,
    ): ...


class AggregationService(Protocol):
    def on_workout_completed(
        self, user_id, plan_id, session_id: str, duration_minutes: int
    ) -> WeeklyStats | None: ...


class MotivationService(Protocol):
    def get_post_workout_message(
        self, mood: str, mood_intensity: int, workout_name: str, exercise_count: int
    ) -> str | None: ...


class ExerciseProgress:
    """Sets recorded for one exercise during a session."""

    def __init__(self, exercise_id: str) -> None:
        self.exercise_id = exercise_id
        self.completed_sets: int = 0
        self.weights: list[float] = []
        self.reps: list[int] = []

    def record(self, weight: float, reps: int) -> None:
        self.weights.append(weight)
        self.reps.append(reps)
        self.completed_sets += 1

    def average_weight(self) -> float | None:
        if not self.weights:
            return None
        return sum(self.weights) / len(self.weights)


@dataclass
class DeferredExercise:
    exercise: Exercise
    count: int
    deferred_at: float


class WorkoutSession:
    """In-memory state machine for a workout being performed.

    The session walks a *working sequence* of exercises.  It starts as the
    plan's exercise list and may grow when skipped exercises are offered
    again at the end of their muscle group.  Sets are recorded with
    :meth:`complete_set`, exercises are skipped with
    :meth:`defer_current_exercise` and the workout is closed by
    :meth:`finalize` or :meth:`cancel`.

    Operations that are not allowed raise a :class:`SessionError` subclass
    before changing anything.
    """

    def __init__(
        self,
        plan_id,
        exercises: Iterable[Exercise],
        *,
        session_id: str | None = None,
        user_id=None,
        plan_name: str = "",
        persistence: SessionPersistence | None = None,
        aggregation: AggregationService | None = None,
        motivation: MotivationService | None = None,
        start_time: float | None = None,
    ):
        self.plan_id = plan_id
        self.plan_name = plan_name
        self.user_id = user_id
        self.session_id = session_id or uuid.uuid4().hex
        self.persistence = persistence
        self.aggregation = aggregation
        self.motivation = motivation

        self.plan: tuple[Exercise, ...] = tuple(exercises)
        self._plan_index: dict[str, int] = {}
        for idx, exercise in enumerate(self.plan):
            if not isinstance(exercise, Exercise):
                raise TypeError(f"Expected Exercise, got {type(exercise).__name__}")
            if exercise.id in self._plan_index:
                raise ValueError(f"Duplicate exercise id '{exercise.id}' in plan")
            self._plan_index[exercise.id] = idx

        self.sequence: list[Exercise] = list(self.plan)
        self.current_index = 0
        self.progress: dict[str, ExerciseProgress] = {}
        # muscle group -> exercise id -> deferred record, in defer order
        self.deferred: dict[str, dict[str, DeferredExercise]] = {}
        self.processed_groups: set[str] = set()
        self.ignored: list[Exercise] = []
        self.rest_timer = RestTimer()

        self.start_time = time.time() if start_time is None else start_time
        self.end_time: float | None = None
        self.closed = False

    @classmethod
    def start(cls, plan_store: PlanStore, plan_id, **kwargs) -> "WorkoutSession":
        """Fetch ``plan_id`` from ``plan_store`` and open a session for it."""

        exercises = plan_store.get_exercises(plan_id)
        if "plan_name" not in kwargs and hasattr(plan_store, "get_plan_name"):
            kwargs["plan_name"] = plan_store.get_plan_name(plan_id)
        session = cls(plan_id, exercises, **kwargs)
        logging.info(
            "Started workout session %s for plan %s with %d exercises",
            session.session_id,
            plan_id,
            len(session.plan),
        )
        return session

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------

    @property
    def current_exercise(self) -> Exercise | None:
        if 0 <= self.current_index < len(self.sequence):
            return self.sequence[self.current_index]
        return None

    def completed_sets(self, exercise_id: str) -> int:
        progress = self.progress.get(exercise_id)
        return progress.completed_sets if progress else 0

    def is_exercise_complete(self, exercise: Exercise) -> bool:
        return self.completed_sets(exercise.id) >= exercise.sets

    def is_complete(self) -> bool:
        """Return ``True`` once every exercise in the working sequence is done."""

        return all(self.is_exercise_complete(ex) for ex in self.sequence)

    def deferred_exercises(self, group: str | None = None) -> list[Exercise]:
        """Return deferred exercises, optionally limited to one muscle group."""

        groups = [self.deferred.get(group, {})] if group else self.deferred.values()
        return [entry.exercise for entries in groups for entry in entries.values()]

    def defer_count(self, exercise: Exercise) -> int:
        entry = self.deferred.get(exercise.group_key, {}).get(exercise.id)
        return entry.count if entry else 0

    def is_last_of_group(self, exercise: Exercise) -> bool:
        """Return ``True`` if the plan moves to another group after ``exercise``."""

        idx = self._plan_index[exercise.id]
        if idx + 1 >= len(self.plan):
            return True
        return self.plan[idx + 1].group_key != exercise.group_key

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self.closed:
            raise SessionClosed()

    def _advance(self) -> None:
        if self.current_index < len(self.sequence) - 1:
            self.current_index += 1

    def complete_set(self, exercise_id, weight: float, reps: int) -> ExerciseProgress:
        """Record a finished set of the current exercise.

        Arms the rest timer when the exercise declares a rest time and still
        has sets left.  Once the last set is recorded the session moves on to
        the next exercise, unless this is the final one in the sequence.
        """

        self._ensure_open()
        current = self.current_exercise
        if current is None or str(exercise_id) != current.id:
            raise ExerciseNotCurrent(exercise_id, current.id if current else None)
        if self.is_exercise_complete(current):
            raise ExerciseAlreadyComplete(current.id)
        weight = float(weight)
        reps = int(reps)
        if weight < 0 or reps < 0:
            raise ValueError("Weight and reps must not be negative")

        progress = self.progress.setdefault(current.id, ExerciseProgress(current.id))
        progress.record(weight, reps)

        group = self.deferred.get(current.group_key)
        if (
            group
            and current.id in group
            and progress.completed_sets >= current.sets
        ):
            del group[current.id]
            if not group:
                del self.deferred[current.group_key]

        if current.rest and progress.completed_sets < current.sets:
            self.rest_timer.arm(current.rest)

        if progress.completed_sets >= current.sets:
            self._advance()
        return progress

    def defer_current_exercise(
        self,
        ignore_permanently: bool | None = None,
        *,
        now: float | None = None,
    ) -> Exercise | None:
        """Skip the current exercise and return the one to perform next.

        The first skip remembers the exercise in its muscle group.  When the
        last exercise of that group is skipped, the group's remembered
        exercises that are still incomplete are queued again right after the
        following exercise.  This happens once per group per session.

        Skipping an exercise a second time raises :class:`AlreadyDeferredOnce`
        unless ``ignore_permanently`` says what to do with it: ``True`` drops
        the exercise from the rest of the workout, ``False`` moves past it
        and leaves it deferred.
        """

        self._ensure_open()
        current = self.current_exercise
        if current is None:
            raise SessionError("There is no exercise to skip")
        if self.is_exercise_complete(current):
            raise ExerciseAlreadyComplete(current.id)

        key = current.group_key
        entry = self.deferred.get(key, {}).get(current.id)
        if entry is not None:
            if ignore_permanently is None:
                raise AlreadyDeferredOnce(current)
            if ignore_permanently:
                self._exclude(current)
            else:
                self._advance()
            self.rest_timer.cancel()
            return self.current_exercise

        timestamp = time.time() if now is None else now
        self.deferred.setdefault(key, {})[current.id] = DeferredExercise(
            current, 1, timestamp
        )

        if self.is_last_of_group(current):
            self._reinsert_group(key)
        self._advance()
        self.rest_timer.cancel()
        return self.current_exercise

    def _reinsert_group(self, key: str) -> None:
        if key in self.processed_groups:
            return
        pending = [
            entry.exercise
            for entry in self.deferred.get(key, {}).values()
            if not self.is_exercise_complete(entry.exercise)
        ]
        if not pending:
            return
        pending.sort(key=lambda ex: self._plan_index[ex.id])
        insert_at = min(self.current_index + 2, len(self.sequence))
        self.sequence[insert_at:insert_at] = pending
        self.processed_groups.add(key)
        logging.info(
            "Re-queued %d skipped exercise(s) for group '%s'", len(pending), key
        )

    def _exclude(self, exercise: Exercise) -> None:
        """Drop ``exercise`` from the deferred registry and working sequence."""

        group = self.deferred.get(exercise.group_key, {})
        group.pop(exercise.id, None)
        if not group:
            self.deferred.pop(exercise.group_key, None)

        removed_before = sum(
            1 for ex in self.sequence[: self.current_index] if ex.id == exercise.id
        )
        self.sequence = [ex for ex in self.sequence if ex.id != exercise.id]
        self.current_index -= removed_before
        if self.current_index >= len(self.sequence):
            self.current_index = max(0, len(self.sequence) - 1)
        self.ignored.append(exercise)
        logging.info("Exercise '%s' ignored for the rest of the workout", exercise.name)

    # ------------------------------------------------------------------
    # Rest timer
    # ------------------------------------------------------------------

    def tick_rest(self, seconds: int = 1) -> int:
        """Advance the rest countdown; returns the seconds left."""

        self._ensure_open()
        return self.rest_timer.tick(seconds)

    def adjust_rest(self, seconds: int) -> int:
        self._ensure_open()
        return self.rest_timer.adjust(seconds)

    def cancel_rest(self) -> None:
        self._ensure_open()
        self.rest_timer.cancel()

    # ------------------------------------------------------------------
    # Closing the session
    # ------------------------------------------------------------------

    def exercise_summaries(self) -> list[ExerciseSummary]:
        """Return one summary per exercise with at least one recorded set."""

        summaries = []
        for exercise in self.plan:
            progress = self.progress.get(exercise.id)
            if not progress or not progress.completed_sets:
                continue
            summaries.append(
                ExerciseSummary(
                    exercise_id=exercise.id,
                    name=exercise.name,
                    completed_sets=progress.completed_sets,
                    reps=list(progress.reps),
                    average_weight=progress.average_weight(),
                )
            )
        return summaries

    def finalize(
        self,
        end_time: float | None = None,
        *,
        mood: str | None = None,
        mood_intensity: int | None = None,
    ) -> FinalizedSession:
        """Close the session and hand its results to the collaborators.

        The session record must be written for the call to succeed; if that
        write fails :class:`PersistenceError` is raised and the session stays
        open so it can be retried.  Per-exercise records, the dashboard
        roll-up and the motivational message are best effort.
        """

        if self.closed:
            raise SessionAlreadyClosed()
        end = time.time() if end_time is None else end_time
        if end < self.start_time:
            raise ValueError("Workout cannot end before it started")
        duration = round_minutes(end - self.start_time)
        summaries = self.exercise_summaries()

        if self.persistence is not None:
            try:
                result = self.persistence.save_session(
                    self.session_id, duration, summaries
                )
            except Exception as exc:
                logging.exception("Saving workout session %s failed", self.session_id)
                raise PersistenceError(
                    f"Could not save workout session {self.session_id}"
                ) from exc
            if result is False:
                raise PersistenceError(
                    f"Could not save workout session {self.session_id}"
                )
            for summary in summaries:
                try:
                    self.persistence.save_exercise_completion(
                        self.session_id,
                        summary.exercise_id,
                        summary.completed_sets,
                        summary.average_weight,
                        reps=summary.reps,
                    )
                except Exception:
                    logging.exception(
                        "Saving exercise %s for session %s failed",
                        summary.exercise_id,
                        self.session_id,
                    )

        self.end_time = end
        self.closed = True
        self.rest_timer.cancel()

        record = FinalizedSession(
            session_id=self.session_id,
            plan_id=self.plan_id,
            started_at=self.start_time,
            ended_at=end,
            duration_minutes=duration,
            exercises=summaries,
        )

        if self.aggregation is not None:
            try:
                record.weekly_stats = self.aggregation.on_workout_completed(
                    self.user_id, self.plan_id, self.session_id, duration
                )
            except Exception:
                logging.warning(
                    "Weekly stats update failed for session %s",
                    self.session_id,
                    exc_info=True,
                )

        if mood and self.motivation is not None:
            intensity = (
                MOOD_INTENSITIES.get(mood, 3) if mood_intensity is None else mood_intensity
            )
            try:
                record.motivation_message = self.motivation.get_post_workout_message(
                    mood, intensity, self.plan_name, len(self.plan)
                )
            except Exception:
                logging.warning(
                    "Post-workout message unavailable for session %s",
                    self.session_id,
                    exc_info=True,
                )

        logging.info(
            "Finalized workout session %s (%d min, %d exercises)",
            self.session_id,
            duration,
            len(summaries),
        )
        return record

    def cancel(self) -> None:
        """Close the session without saving anything."""

        self._ensure_open()
        self.rest_timer.cancel()
        self.closed = True
        logging.info("Cancelled workout session %s", self.session_id)

    # ------------------------------------------------------------------
    # Display helpers
    # ------------------------------------------------------------------

    def next_exercise_display(self) -> str:
        current = self.current_exercise
        if current is None:
            return ""
        done = self.completed_sets(current.id)
        if done >= current.sets:
            return f"{current.name} complete"
        return f"{current.name} set {done + 1} of {current.sets}"

    def overall_progress(self) -> int:
        """Return the percentage of distinct exercises that are complete."""

        unique = {ex.id: ex for ex in self.sequence}
        if not unique:
            return 100
        done = sum(1 for ex in unique.values() if self.is_exercise_complete(ex))
        return round(done / len(unique) * 100)

    def summary(self) -> str:
        """Return a formatted text summary of the session."""

        end_time = self.end_time or time.time()
        lines = [f"Workout: {self.plan_name or self.plan_id}"]
        start = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(self.start_time))
        end = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(end_time))
        dur = int(end_time - self.start_time)
        m, s = divmod(dur, 60)
        lines.append(f"Start: {start}")
        lines.append(f"End:   {end}")
        lines.append(f"Duration: {m}m {s}s")
        for exercise in self.plan:
            lines.append(f"\n{exercise.name}")
            progress = self.progress.get(exercise.id)
            if progress:
                for idx, (weight, reps) in enumerate(
                    zip(progress.weights, progress.reps), 1
                ):
                    lines.append(f"  Set {idx}: {weight:g}kg x {reps} reps")
            if exercise in self.ignored:
                lines.append("  Ignored")
            elif not self.is_exercise_complete(exercise) and self.defer_count(exercise):
                lines.append("  Skipped")
        return "\n".join(lines)
