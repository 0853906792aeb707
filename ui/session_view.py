"""Text shown by the session screens, kept free of Kivy imports."""

from __future__ import annotations

from datetime import datetime

from backend.records import FinalizedSession
from backend.workout_session import WorkoutSession
from core import format_clock


def exercise_header(session: WorkoutSession) -> str:
    """Return ``"Exercise 2 of 5"`` for the current position."""

    if not session.sequence:
        return "No exercises"
    return f"Exercise {session.current_index + 1} of {len(session.sequence)}"


def exercise_details(session: WorkoutSession) -> str:
    exercise = session.current_exercise
    if exercise is None:
        return ""
    parts = []
    if exercise.reps:
        parts.append(f"{exercise.reps} reps")
    if exercise.weight is not None:
        parts.append(f"{exercise.weight:g}kg")
    if exercise.muscle_group:
        parts.append(exercise.muscle_group)
    return " | ".join(parts)


def previous_sets(session: WorkoutSession) -> list[str]:
    """Return one line per set already recorded for the current exercise."""

    exercise = session.current_exercise
    progress = session.progress.get(exercise.id) if exercise else None
    if not progress:
        return []
    return [
        f"Set {idx}: {weight:g}kg x {reps} reps"
        for idx, (weight, reps) in enumerate(zip(progress.weights, progress.reps), 1)
    ]


def rest_label(session: WorkoutSession) -> str:
    timer = session.rest_timer
    return format_clock(timer.remaining) if timer.active else ""


def parse_set_input(weight_text: str, reps_text: str, exercise) -> tuple[float, int]:
    """Return ``(weight, reps)`` from the input fields.

    Empty fields fall back to the plan's target weight and the lower bound
    of its rep range.
    """

    weight_text = (weight_text or "").strip()
    reps_text = (reps_text or "").strip()
    if weight_text:
        weight = float(weight_text)
    else:
        weight = exercise.weight or 0.0
    if reps_text:
        reps = int(reps_text)
    else:
        low = exercise.reps.split("-")[0].strip() if exercise.reps else ""
        reps = int(low) if low.isdigit() else 0
    return weight, reps


def summary_lines(record: FinalizedSession) -> list[str]:
    lines = [f"Duration: {record.duration_minutes} min"]
    for summary in record.exercises:
        line = f"{summary.name}: {summary.completed_sets} sets"
        if summary.average_weight is not None:
            line += f" @ {summary.average_weight:g}kg avg"
        lines.append(line)
    if record.weekly_stats is not None:
        stats = record.weekly_stats
        lines.append(
            f"This week: {stats.weekly_count}/{stats.weekly_target} workouts"
        )
    return lines


def discard_session(session: WorkoutSession, store=None) -> None:
    """Cancel ``session`` and remove the row written when it started."""

    if not session.closed:
        session.cancel()
    if store is not None:
        store.delete_session(session.session_id)


def history_secondary_text(entry: dict) -> str:
    """Return ``"Wed 15/05/2024 18:30 - 42 min"`` for a history entry."""

    when = datetime.fromtimestamp(entry["completed_at"]).strftime("%a %d/%m/%Y %H:%M")
    duration = entry.get("duration_minutes")
    if duration is None:
        return when
    return f"{when} - {duration} min"


def session_detail_lines(details: dict) -> list[str]:
    if not details:
        return []
    lines = [f"Duration: {details.get('duration_minutes') or 0} min"]
    if details.get("mood"):
        lines.append(f"Mood: {details['mood']}")
    for exercise in details.get("exercises", []):
        line = f"{exercise['name'] or exercise['exercise_id']}: {exercise['sets']} sets"
        if exercise["reps"]:
            line += " (" + ", ".join(str(r) for r in exercise["reps"]) + " reps)"
        if exercise["weight"] is not None:
            line += f" @ {exercise['weight']:g}kg"
        lines.append(line)
    if details.get("post_workout_message"):
        lines.append("")
        lines.append(details["post_workout_message"])
    return lines
