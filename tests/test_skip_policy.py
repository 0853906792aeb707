import pytest

from backend.errors import AlreadyDeferredOnce, ExerciseAlreadyComplete, SessionError
from backend.workout_session import WorkoutSession
from conftest import make_exercise


def _ids(session):
    return [ex.id for ex in session.sequence]


@pytest.fixture
def grouped_session():
    return WorkoutSession(
        "p1",
        [
            make_exercise("A", group="legs"),
            make_exercise("B", group="legs"),
            make_exercise("C", group="chest"),
        ],
        start_time=0,
    )


def test_skipping_a_whole_group_requeues_it_after_next_exercise(grouped_session):
    s = grouped_session
    nxt = s.defer_current_exercise(now=10)
    assert nxt.id == "B"
    assert s.defer_count(s.plan[0]) == 1
    assert _ids(s) == ["A", "B", "C"]

    nxt = s.defer_current_exercise(now=11)
    assert nxt.id == "C"
    assert _ids(s) == ["A", "B", "C", "A", "B"]
    assert s.current_index == 2
    assert "legs" in s.processed_groups

    s.complete_set("C", 20, 10)
    assert s.current_exercise.id == "A"
    s.complete_set("A", 20, 10)
    s.complete_set("B", 20, 10)
    assert s.is_complete()
    # finishing a skipped exercise clears it from the deferred registry
    assert s.deferred == {}


def test_second_skip_needs_a_decision(grouped_session):
    s = grouped_session
    s.defer_current_exercise()
    s.defer_current_exercise()
    s.complete_set("C", 20, 10)
    assert s.current_exercise.id == "A"

    with pytest.raises(AlreadyDeferredOnce) as info:
        s.defer_current_exercise()
    assert info.value.exercise.id == "A"
    assert _ids(s) == ["A", "B", "C", "A", "B"]
    assert s.current_index == 3


def test_ignoring_removes_exercise_for_the_rest_of_the_workout(grouped_session):
    s = grouped_session
    s.defer_current_exercise()
    s.defer_current_exercise()
    s.complete_set("C", 20, 10)

    nxt = s.defer_current_exercise(ignore_permanently=True)
    assert nxt.id == "B"
    assert _ids(s) == ["B", "C", "B"]
    assert s.current_index == 2
    assert [ex.id for ex in s.deferred_exercises("legs")] == ["B"]
    assert [ex.id for ex in s.ignored] == ["A"]

    s.complete_set("B", 20, 10)
    assert s.is_complete()
    assert "Ignored" in s.summary()


def test_declining_moves_on_and_keeps_exercise_deferred(grouped_session):
    s = grouped_session
    s.defer_current_exercise()
    s.defer_current_exercise()
    s.complete_set("C", 20, 10)

    nxt = s.defer_current_exercise(ignore_permanently=False)
    assert nxt.id == "B"
    assert s.current_index == 4
    assert _ids(s) == ["A", "B", "C", "A", "B"]
    assert s.defer_count(s.plan[0]) == 1

    s.complete_set("B", 20, 10)
    # A was never finished and is not offered again
    assert not s.is_complete()
    assert s.current_exercise.id == "B"


def test_group_is_requeued_only_once():
    s = WorkoutSession(
        "p1",
        [make_exercise("A", group="legs"), make_exercise("C", group="chest")],
    )
    s.defer_current_exercise()
    assert _ids(s) == ["A", "C", "A"]
    s.complete_set("C", 20, 10)
    s.defer_current_exercise(ignore_permanently=False)
    assert _ids(s) == ["A", "C", "A"]


def test_partly_done_exercise_stays_deferred():
    s = WorkoutSession(
        "p1",
        [
            make_exercise("A", sets=2, group="legs"),
            make_exercise("B", group="legs"),
            make_exercise("C", group="chest"),
        ],
    )
    s.complete_set("A", 50, 8)
    s.defer_current_exercise()
    s.complete_set("B", 50, 8)
    assert _ids(s) == ["A", "B", "C"]
    assert s.deferred_exercises() == [s.plan[0]]


def test_requeue_keeps_plan_order():
    s = WorkoutSession(
        "p1",
        [
            make_exercise("A", group="legs"),
            make_exercise("B", group="legs"),
            make_exercise("C", group="legs"),
            make_exercise("D"),
        ],
    )
    s.defer_current_exercise()
    s.complete_set("B", 10, 10)
    s.defer_current_exercise()
    assert _ids(s) == ["A", "B", "C", "D", "A", "C"]


def test_ungrouped_exercises_share_one_group():
    s = WorkoutSession("p1", [make_exercise("X"), make_exercise("Y")])
    s.defer_current_exercise()
    assert _ids(s) == ["X", "Y"]
    s.defer_current_exercise()
    assert _ids(s) == ["X", "Y", "X", "Y"]
    assert s.deferred_exercises("ungrouped") == list(s.plan)


def test_skip_never_changes_other_progress():
    s = WorkoutSession(
        "p1", [make_exercise("A", sets=3), make_exercise("B", sets=2, rest=60)]
    )
    s.complete_set("A", 10, 10)
    s.defer_current_exercise()
    assert s.completed_sets("A") == 1
    s.complete_set("B", 10, 10)
    assert s.rest_timer.active
    s.defer_current_exercise()
    assert not s.rest_timer.active
    assert s.completed_sets("B") == 1
    assert s.plan[1].sets == 2


def test_skipping_a_finished_exercise_is_rejected():
    s = WorkoutSession("p1", [make_exercise("A")])
    s.complete_set("A", 10, 10)
    with pytest.raises(ExerciseAlreadyComplete):
        s.defer_current_exercise()
    assert s.deferred == {}
    assert _ids(s) == ["A"]


def test_ignoring_the_last_exercise_leaves_empty_workout():
    s = WorkoutSession("p1", [make_exercise("A")])
    s.defer_current_exercise()
    s.defer_current_exercise(ignore_permanently=True)
    assert s.sequence == []
    assert s.current_exercise is None
    assert s.is_complete()


def test_partial_sets_on_requeued_exercise_still_need_confirmation():
    s = WorkoutSession(
        "p1",
        [
            make_exercise("A", sets=2, group="legs"),
            make_exercise("B", group="legs"),
            make_exercise("C", group="chest"),
        ],
    )
    s.defer_current_exercise()
    s.defer_current_exercise()
    s.complete_set("C", 20, 10)
    assert s.current_exercise.id == "A"
    s.complete_set("A", 50, 8)
    assert s.defer_count(s.plan[0]) == 1

    with pytest.raises(AlreadyDeferredOnce):
        s.defer_current_exercise()
    assert s.current_index == 3
    assert s.completed_sets("A") == 1

    s.complete_set("A", 50, 8)
    assert s.defer_count(s.plan[0]) == 0


def test_answering_after_the_workout_closed_is_a_session_error(grouped_session):
    s = grouped_session
    s.defer_current_exercise()
    s.defer_current_exercise()
    s.complete_set("C", 20, 10)
    with pytest.raises(AlreadyDeferredOnce):
        s.defer_current_exercise()
    s.cancel()
    with pytest.raises(SessionError):
        s.defer_current_exercise(ignore_permanently=True)
    assert _ids(s) == ["A", "B", "C", "A", "B"]
