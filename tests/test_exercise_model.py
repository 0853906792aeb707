import dataclasses

import pytest

from backend.exercise import Exercise
from core import DEFAULT_SETS_PER_EXERCISE


def test_from_row_normalises_values():
    ex = Exercise.from_row(
        {
            "id": 7,
            "name": "  Squat ",
            "sets": "4",
            "reps": "8-10",
            "weight": 80,
            "rest": 0,
            "notes": "",
            "muscle_group": " ",
        }
    )
    assert ex.id == "7"
    assert ex.name == "Squat"
    assert ex.sets == 4
    assert ex.weight == 80.0
    assert ex.rest is None
    assert ex.notes is None
    assert ex.muscle_group is None
    assert ex.group_key == "ungrouped"


def test_missing_sets_use_default():
    ex = Exercise.from_row({"id": "a", "name": "Plank"})
    assert ex.sets == DEFAULT_SETS_PER_EXERCISE
    assert ex.reps == ""


@pytest.mark.parametrize(
    "row",
    [
        {"name": "No id"},
        {"id": "", "name": "Empty id"},
        {"id": "x", "name": ""},
        {"id": "x", "name": "Zero", "sets": 0},
        {"id": "x", "name": "Negative rest", "rest": -5},
    ],
)
def test_invalid_rows_rejected(row):
    with pytest.raises(ValueError):
        Exercise.from_row(row)


def test_exercise_is_immutable():
    ex = Exercise(id="a", name="Row", muscle_group="back")
    with pytest.raises(dataclasses.FrozenInstanceError):
        ex.sets = 10
    assert ex.group_key == "back"


def test_to_dict_round_trips_through_from_row():
    ex = Exercise(id="a", name="Row", sets=2, reps="12", weight=40.0, rest=60)
    assert Exercise.from_row(ex.to_dict()) == ex
