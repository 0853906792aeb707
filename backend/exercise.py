from __future__ import annotations

from dataclasses import dataclass

from core import DEFAULT_SETS_PER_EXERCISE, UNGROUPED


@dataclass(frozen=True)
class Exercise:
    """Exercise prescribed by a workout plan.

    Instances are created once when a session starts and never change while
    it runs.  Use :meth:`from_row` to build one from a plan-store mapping;
    it validates the values so the session engine can rely on them.
    """

    id: str
    name: str
    sets: int = DEFAULT_SETS_PER_EXERCISE
    reps: str = ""
    weight: float | None = None
    rest: int | None = None
    notes: str | None = None
    muscle_group: str | None = None

    @property
    def group_key(self) -> str:
        """Return the muscle group used to scope skips."""

        return self.muscle_group or UNGROUPED

    @classmethod
    def from_row(cls, row: dict) -> "Exercise":
        """Return an :class:`Exercise` built from a plan-store ``row``.

        ``row`` must provide ``id`` and ``name``.  Missing set counts fall back
        to :data:`core.DEFAULT_SETS_PER_EXERCISE`; an empty muscle group or a
        zero rest time is treated as absent.
        """

        ex_id = row.get("id")
        name = (row.get("name") or "").strip()
        if ex_id is None or ex_id == "":
            raise ValueError("Exercise row is missing an id")
        if not name:
            raise ValueError(f"Exercise '{ex_id}' is missing a name")

        sets = row.get("sets")
        sets = DEFAULT_SETS_PER_EXERCISE if sets is None else int(sets)
        if sets < 1:
            raise ValueError(f"Exercise '{name}' must have at least one set")

        rest = row.get("rest")
        rest = int(rest) if rest else None
        if rest is not None and rest < 0:
            raise ValueError(f"Exercise '{name}' has a negative rest time")

        weight = row.get("weight")
        group = (row.get("muscle_group") or "").strip() or None

        return cls(
            id=str(ex_id),
            name=name,
            sets=sets,
            reps=str(row.get("reps") or ""),
            weight=float(weight) if weight is not None else None,
            rest=rest,
            notes=row.get("notes") or None,
            muscle_group=group,
        )

    def to_dict(self) -> dict:
        """Return a ``dict`` representation of the exercise."""

        return {
            "id": self.id,
            "name": self.name,
            "sets": self.sets,
            "reps": self.reps,
            "weight": self.weight,
            "rest": self.rest,
            "notes": self.notes,
            "muscle_group": self.muscle_group,
        }
