from datetime import date, timedelta

import pytest

from workout_progress.core.enums import ExerciseType
from workout_progress.core.errors import NotFound, ValidationFailed
from workout_progress.services.history import WorkoutHistory
from workout_progress.services.pr_detection import flag_prs
from workout_progress.services.streak import workout_streak

from conftest import T0


@pytest.fixture
def history(make_logged):
    bench = flag_prs(
        [
            make_logged(weight=50, reps=2, minutes=0, session_id="workout_1"),
            make_logged(weight=40, reps=3, minutes=60 * 24, session_id="workout_2"),
            make_logged(weight=45, reps=2, minutes=60 * 48, session_id="workout_3"),
            make_logged(weight=45, reps=2, minutes=60 * 48 + 2, session_id="workout_3"),
        ],
        ExerciseType.WEIGHT_REPS,
    )
    squat = flag_prs(
        [make_logged("squat", weight=100, reps=5, minutes=30, session_id="workout_1")],
        ExerciseType.WEIGHT_REPS,
    )
    return WorkoutHistory(logged_entries=bench + squat)


def test_last_session_entries_picks_most_recent_session(history):
    last = history.last_session_entries("bench")
    assert {e.workout_session_id for e in last} == {"workout_3"}
    assert len(last) == 2

    before = history.last_session_entries("bench", exclude_session_id="workout_3")
    assert [e.workout_session_id for e in before] == ["workout_2"]
    assert history.last_session_entries("deadlift") == []


def test_remove_entry_reflags_later_sets(history):
    beaten = next(e for e in history.entries_for_exercise("bench") if e.workout_session_id == "workout_2")
    assert beaten.is_pr

    removed, changed = history.remove_entry(beaten.id, ExerciseType.WEIGHT_REPS)

    assert removed.id == beaten.id
    assert changed == []  # 45x2 never beat the 50x2 record
    assert [e.is_pr for e in history.entries_for_exercise("bench")] == [True, False, False]
    assert len(history.entries_for_exercise("squat")) == 1
    with pytest.raises(NotFound):
        history.get_entry(beaten.id)


def test_restore_entry_puts_set_back(history):
    first = history.entries_for_exercise("bench")[0]
    _, changed = history.remove_entry(first.id, ExerciseType.WEIGHT_REPS)
    assert changed == []  # 40x3 already held a record

    restored_changes = history.restore_entry(first, ExerciseType.WEIGHT_REPS)

    assert [e.is_pr for e in history.entries_for_exercise("bench")] == [True, True, False, False]
    assert [e.id for e in restored_changes] == [first.id]
    with pytest.raises(ValidationFailed):
        history.restore_entry(first, ExerciseType.WEIGHT_REPS)


def test_pr_entries_since(history):
    recent = history.pr_entries(since=T0 + timedelta(hours=1))
    assert [e.weight for e in recent] == [40]


@pytest.mark.parametrize(
    "dates, expected",
    [
        ([], (0, 0, None)),
        ([date(2025, 3, 10), date(2025, 3, 9), date(2025, 3, 8)], (3, 3, "2025-03-10")),
        ([date(2025, 3, 9), date(2025, 3, 5), date(2025, 3, 4)], (1, 2, "2025-03-09")),
        ([date(2025, 3, 7), date(2025, 3, 6)], (0, 2, "2025-03-07")),
    ],
)
def test_workout_streak(dates, expected):
    streak = workout_streak(dates, today=date(2025, 3, 10))
    assert (streak["current_streak"], streak["longest_streak"], streak["last_workout_date"]) == expected


def test_planned_removal_changes_nothing_until_applied(history):
    first = history.entries_for_exercise("bench")[0]
    before = history.logged_entries

    removed, changed = history.plan_removal(first.id, ExerciseType.WEIGHT_REPS)

    assert history.logged_entries == before
    history.apply_changes(changed, removed_id=removed.id)
    assert first.id not in {e.id for e in history.logged_entries}
    assert [e.is_pr for e in history.entries_for_exercise("bench")] == [True, False, False]
