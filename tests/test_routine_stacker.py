from workout_progress.core.enums import StartMethod
from workout_progress.schemas.routine import Routine, RoutineExercise, RoutineSet
from workout_progress.services.routine_stacker import default_workout_name, stack_routines


def routine(routine_id: str, title: str, *exercise_ids: str, sets_per_exercise: int = 2) -> Routine:
    return Routine(
        id=routine_id,
        title=title,
        exercises=[
            RoutineExercise(
                id=f"{routine_id}-{i}",
                exercise_id=exercise_id,
                order=i,
                sets=[RoutineSet(id=f"{routine_id}-{i}-{n}", weight=40, reps=10) for n in range(sets_per_exercise)],
            )
            for i, exercise_id in enumerate(exercise_ids)
        ],
    )


PUSH = routine("routine_push", "Push", "bench", "dips", "pushdown")
CORE = routine("routine_core", "Core", "plank")


def test_stacking_orders_exercises_globally():
    session = stack_routines(["routine_push", "routine_core"], [CORE, PUSH])

    assert [e.exercise_id for e in session.exercises] == ["bench", "dips", "pushdown", "plank"]
    assert [e.order for e in session.exercises] == [0, 1, 2, 3]
    assert [e.from_routine_id for e in session.exercises] == ["routine_push"] * 3 + ["routine_core"]
    assert session.source_routine_ids == ["routine_push", "routine_core"]
    assert session.start_method == StartMethod.ROUTINES
    assert session.is_active is False
    assert session.name == "Push + Core"


def test_sets_get_fresh_ids_and_keep_defaults():
    session = stack_routines(["routine_push"], [PUSH])

    entries = session.exercises[0].entries
    assert len(entries) == 2
    assert all(e.id.startswith("wset_") for e in entries)
    assert len({e.id for e in entries}) == 2
    assert all((e.weight, e.reps, e.is_completed, e.rpe) == (40, 10, False, None) for e in entries)


def test_clear_values_keeps_set_count_only():
    session = stack_routines(["routine_push"], [PUSH], clear_values=True)

    entries = session.exercises[0].entries
    assert len(entries) == 2
    assert all(e.weight is None and e.reps is None for e in entries)


def test_exercise_without_sets_gets_one_empty_entry():
    bare = routine("routine_bare", "Bare", "bench", sets_per_exercise=0)

    session = stack_routines(["routine_bare"], [bare])

    assert len(session.exercises[0].entries) == 1


def test_unknown_routines_are_skipped():
    session = stack_routines(["missing", "routine_core"], [CORE], workout_name="Evening")

    assert session.source_routine_ids == ["routine_core"]
    assert len(session.exercises) == 1
    assert session.name == "Evening"


def test_default_workout_name():
    assert default_workout_name([]) == "Custom Workout"
    assert default_workout_name(["Legs"]) == "Legs"
    assert default_workout_name(["Push", "Pull"]) == "Push + Pull"
    long_titles = ["Upper Body Hypertrophy", "Lower Body Strength", "Conditioning Finisher"]
    assert default_workout_name(long_titles) == "Upper Body Hypertrophy + 2 more"
