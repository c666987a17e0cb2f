from datetime import datetime, timedelta, timezone

import pytest

from workout_progress.core.enums import ExerciseType, StartMethod
from workout_progress.core.errors import NoActiveSession, NotFound, SessionAlreadyActive, ValidationFailed
from workout_progress.schemas.catalog import ExerciseDetails
from workout_progress.schemas.entry import EntrySeed, EntryUpdate
from workout_progress.schemas.workout import WorkoutSession
from workout_progress.services.history import WorkoutHistory
from workout_progress.services.session_store import WorkoutSessionStore

BENCH = ExerciseDetails(name="Bench Press", exercise_type=ExerciseType.WEIGHT_REPS)
PLANK = ExerciseDetails(name="Plank", exercise_type=ExerciseType.DURATION)
DETAILS = {"bench": BENCH, "plank": PLANK, "squat": BENCH}


class FakeClock:
    def __init__(self):
        self.now = datetime(2025, 3, 5, 18, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return WorkoutSessionStore(clock=clock)


def test_operations_require_active_session(store):
    with pytest.raises(NoActiveSession):
        store.add_exercises(["bench"])
    with pytest.raises(NoActiveSession):
        store.finish()
    with pytest.raises(NoActiveSession):
        store.stats()


def test_start_twice_is_rejected(store):
    store.start(name="Morning")
    with pytest.raises(SessionAlreadyActive):
        store.start()
    with pytest.raises(SessionAlreadyActive):
        store.install(WorkoutSession(id="workout_x"))
    store.discard()
    assert store.start().is_active


def test_first_time_exercise_seeds_one_empty_entry(store):
    store.start()
    (exercise,) = store.add_exercises(["bench"], DETAILS)
    assert len(exercise.entries) == 1
    assert exercise.entries[0].weight is None
    assert exercise.exercise_details == BENCH


def test_seeding_mirrors_last_session_entry_count(make_logged):
    history = WorkoutHistory(
        logged_entries=[
            make_logged(weight=50, reps=5, minutes=0, session_id="old"),
            make_logged(weight=50, reps=5, minutes=1, session_id="old"),
            make_logged(weight=55, reps=5, minutes=60 * 24, session_id="recent"),
            make_logged(weight=55, reps=5, minutes=60 * 24 + 1, session_id="recent"),
            make_logged(weight=55, reps=5, minutes=60 * 24 + 2, session_id="recent"),
        ]
    )
    store = WorkoutSessionStore(history=history)
    store.start()

    bench, squat = store.add_exercises(["bench", "squat"], DETAILS)

    assert len(bench.entries) == 3
    assert all(e.weight is None for e in bench.entries)
    assert len(squat.entries) == 1


def test_same_exercise_twice_gets_distinct_instances(store):
    store.start()
    first, second = store.add_exercises(["bench", "bench"], DETAILS)
    assert first.id != second.id
    assert (first.order, second.order) == (0, 1)


def test_remove_and_replace_exercise(store):
    store.start()
    a, b, c = store.add_exercises(["bench", "squat", "plank"], DETAILS)
    store.update_notes(b.id, "felt heavy")

    store.remove_exercise(a.id)
    assert [e.order for e in store.session.exercises] == [0, 1]

    replaced = store.replace_exercise(b.id, "plank", PLANK)
    assert replaced.id == b.id
    assert replaced.exercise_id == "plank"
    assert replaced.notes is None
    assert len(replaced.entries) == 1
    assert replaced.order == 0

    with pytest.raises(NotFound):
        store.remove_exercise("wex_missing")


def test_update_through_store_propagates(store):
    store.start()
    (bench,) = store.add_exercises(["bench"], DETAILS)
    store.add_entry(bench.id)
    store.add_entry(bench.id)

    store.update_entry(bench.id, bench.entries[0].id, EntryUpdate(weight=80, reps=5))

    assert [(e.weight, e.reps) for e in store.get_exercise(bench.id).entries] == [(80, 5)] * 3


def test_complete_entry_sets_rpe_and_pr(make_logged):
    history = WorkoutHistory(logged_entries=[make_logged(weight=50, reps=2, session_id="old")])
    store = WorkoutSessionStore(history=history)
    store.start()
    (bench,) = store.add_exercises(["bench"], DETAILS)
    first = bench.entries[0]
    store.update_entry(bench.id, first.id, {"weight": 40, "reps": 3})

    done = store.complete_entry(bench.id, first.id, rpe=8)

    assert done.is_completed is True
    assert done.rpe == 8
    assert done.is_pr is True
    assert done.pr_value == 120


def test_complete_entry_autofills_from_previous_completed_set(store):
    store.start()
    (bench,) = store.add_exercises(["bench"], DETAILS)
    first = bench.entries[0]
    store.update_entry(bench.id, first.id, {"weight": 60, "reps": 8})
    store.complete_entry(bench.id, first.id, rpe=7)
    second = store.add_entry(bench.id, copy_forward=False)

    done = store.complete_entry(bench.id, second.id, rpe=8)

    assert (done.weight, done.reps) == (60, 8)
    assert done.is_pr is False  # ties the set before it


def test_complete_entry_reports_missing_fields(store):
    store.start()
    (plank,) = store.add_exercises(["plank"], DETAILS)
    with pytest.raises(ValidationFailed) as excinfo:
        store.complete_entry(plank.id, plank.entries[0].id, rpe=5)
    assert excinfo.value.fields == ["duration"]
    with pytest.raises(ValidationFailed):
        store.complete_entry(plank.id, plank.entries[0].id, rpe=11)


def test_undo_entry_reflags_remaining_sets(store):
    store.start()
    (bench,) = store.add_exercises(["bench"], DETAILS)
    a = bench.entries[0]
    store.update_entry(bench.id, a.id, {"weight": 100, "reps": 1})
    b = store.add_entry(bench.id, copy_forward=False)
    store.update_entry(bench.id, b.id, {"weight": 80, "reps": 1})
    store.complete_entry(bench.id, a.id, rpe=9)
    store.complete_entry(bench.id, b.id, rpe=8)
    assert store.get_exercise(bench.id).entries[1].is_pr is False

    undone = store.undo_entry(bench.id, a.id)

    entries = store.get_exercise(bench.id).entries
    assert undone.is_completed is False and undone.rpe is None and undone.is_pr is None
    assert entries[1].is_pr is True


def test_stats_tracks_duration_volume_and_completed_sets(store, clock):
    store.start()
    (bench,) = store.add_exercises(["bench"], DETAILS)
    store.update_entry(bench.id, bench.entries[0].id, {"weight": 50, "reps": 10})
    store.complete_entry(bench.id, bench.entries[0].id, rpe=7)
    clock.advance(minutes=12)

    stats = store.stats()

    assert stats.duration_seconds == 720
    assert stats.total_volume == 500
    assert stats.completed_sets == 1


def test_finish_excludes_untouched_exercises_and_sets_without_rpe(store, clock):
    store.start(name="Push", start_method=StartMethod.QUICK_START)
    bench, plank, squat = store.add_exercises(["bench", "plank", "squat"], DETAILS)
    store.update_entry(bench.id, bench.entries[0].id, {"weight": 60, "reps": 5, "duration": 99})
    store.complete_entry(bench.id, bench.entries[0].id, rpe=8)
    extra = store.add_entry(bench.id)
    store.update_entry(bench.id, extra.id, {"is_completed": True})  # completed but no RPE
    store.add_entry(bench.id)  # never completed
    store.update_notes(bench.id, "Pause reps")
    store.update_notes(squat.id, "Skipped")
    store.update_entry(plank.id, plank.entries[0].id, {"duration": 60})
    clock.advance(minutes=45)

    result = store.finish()

    summary = result.summary
    assert summary.exercise_ids == ["bench"]
    assert summary.total_sets == 2
    assert summary.total_volume == 600
    assert summary.name == "Push"
    assert summary.start_method == StartMethod.QUICK_START
    assert summary.end_time - summary.start_time == timedelta(minutes=45)
    assert len(result.logged_entries) == 1
    logged = result.logged_entries[0]
    assert logged.duration is None  # irrelevant to Weight Reps
    assert logged.date == clock.now.date()
    assert [n.notes for n in result.exercise_notes] == ["Pause reps"]
    assert not store.is_active
    assert store.history.sessions[0].id == summary.id
    assert store.history.entries_for_exercise("bench") == result.logged_entries


def test_discard_produces_nothing(store):
    store.start()
    (bench,) = store.add_exercises(["bench"], DETAILS)
    store.update_entry(bench.id, bench.entries[0].id, {"weight": 60, "reps": 5})
    store.complete_entry(bench.id, bench.entries[0].id, rpe=8)

    store.discard()

    assert not store.is_active
    assert store.history.logged_entries == []


def test_completing_an_earlier_set_last_takes_the_pr(store):
    store.start()
    (bench,) = store.add_exercises(["bench"], DETAILS)
    first = bench.entries[0]
    store.update_entry(bench.id, first.id, {"weight": 60, "reps": 2})
    second = store.add_entry(bench.id, EntrySeed(weight=50, reps=2), copy_forward=False)

    store.complete_entry(bench.id, second.id, rpe=8)
    assert store.get_exercise(bench.id).entries[1].is_pr is True
    store.complete_entry(bench.id, first.id, rpe=9)

    entries = store.get_exercise(bench.id).entries
    assert [(e.weight, e.is_pr) for e in entries] == [(60, True), (50, False)]
    logged = store.finish().logged_entries
    assert [(e.weight, e.is_pr, e.pr_value) for e in logged] == [(60, True, 120), (50, False, 100)]


def test_editing_a_completed_set_follows_its_new_values(make_logged):
    history = WorkoutHistory(logged_entries=[make_logged(weight=50, reps=2, session_id="old")])
    store = WorkoutSessionStore(history=history)
    store.start()
    (bench,) = store.add_exercises(["bench"], DETAILS)
    entry = bench.entries[0]
    store.update_entry(bench.id, entry.id, {"weight": 60, "reps": 2})
    assert store.complete_entry(bench.id, entry.id, rpe=8).is_pr is True

    edited = store.update_entry(bench.id, entry.id, {"weight": 10, "is_pr": True})

    assert (edited.is_pr, edited.pr_value) == (False, 20)
    (logged,) = store.finish().logged_entries
    assert (logged.weight, logged.is_pr, logged.pr_value) == (10, False, 20)


def test_sets_completed_through_update_are_still_flagged(store):
    store.start()
    (bench,) = store.add_exercises(["bench"], DETAILS)
    entry = bench.entries[0]

    store.update_entry(bench.id, entry.id, {"weight": 50, "reps": 2, "rpe": 8, "is_completed": True})

    (logged,) = store.finish().logged_entries
    assert (logged.is_pr, logged.pr_value) == (True, 100)


def test_summarize_leaves_the_session_active_until_closed(store):
    store.start(name="Push")
    (bench,) = store.add_exercises(["bench"], DETAILS)
    store.update_entry(bench.id, bench.entries[0].id, {"weight": 60, "reps": 5})
    store.complete_entry(bench.id, bench.entries[0].id, rpe=8)

    result = store.summarize()

    assert store.is_active
    assert store.history.sessions == []
    store.close(result)
    assert not store.is_active
    assert [s.id for s in store.history.sessions] == [result.summary.id]
