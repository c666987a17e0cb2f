"""Combine one or more routines into a single, not-yet-active workout session.

Routines are processed in the order given; exercises keep their in-routine
order and are appended with a global, contiguous order index. Unknown routine
ids are skipped. Sets get fresh ids and are never completed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from workout_progress.core.constants import (
    DEFAULT_WORKOUT_NAME,
    STACKED_NAME_MAX_LENGTH,
    STACKED_NAME_SEPARATOR,
)
from workout_progress.core.enums import StartMethod
from workout_progress.schemas.entry import WorkingEntry
from workout_progress.schemas.routine import Routine, RoutineExercise, RoutineSet
from workout_progress.schemas.workout import WorkoutExercise, WorkoutSession
from workout_progress.services.set_mutator import new_entry_id
from workout_progress.services.session_store import new_workout_exercise_id, new_workout_id

logger = logging.getLogger(__name__)


def convert_routine_set(routine_set: RoutineSet, clear_values: bool = False) -> WorkingEntry:
    if clear_values:
        return WorkingEntry(id=new_entry_id())
    return WorkingEntry(
        id=new_entry_id(),
        reps=routine_set.reps,
        weight=routine_set.weight,
        duration=routine_set.duration,
        distance=routine_set.distance,
    )


def convert_routine_exercise(
    routine_exercise: RoutineExercise,
    routine_id: str,
    order: int,
    clear_values: bool = False,
) -> WorkoutExercise:
    ordered_sets = routine_exercise.sets
    entries = [convert_routine_set(s, clear_values) for s in ordered_sets]
    if not entries:
        entries = [WorkingEntry(id=new_entry_id())]
    return WorkoutExercise(
        id=new_workout_exercise_id(),
        exercise_id=routine_exercise.exercise_id,
        exercise_details=routine_exercise.exercise_details,
        entries=entries,
        notes=routine_exercise.notes,
        order=order,
        from_routine_id=routine_id,
    )


def default_workout_name(titles: Sequence[str]) -> str:
    """
    >>> default_workout_name(["Push", "Pull"])
    'Push + Pull'
    """
    if not titles:
        return DEFAULT_WORKOUT_NAME
    if len(titles) == 1:
        return titles[0]
    joined = STACKED_NAME_SEPARATOR.join(titles)
    if len(joined) > STACKED_NAME_MAX_LENGTH:
        return f"{titles[0]}{STACKED_NAME_SEPARATOR}{len(titles) - 1} more"
    return joined


def stack_routines(
    routine_ids: Sequence[str],
    all_routines: Iterable[Routine],
    clear_values: bool = False,
    workout_name: str | None = None,
) -> WorkoutSession:
    by_id = {r.id: r for r in all_routines}
    selected: list[Routine] = []
    for routine_id in routine_ids:
        routine = by_id.get(routine_id)
        if routine is None:
            logger.warning("Routine %s not found, skipping", routine_id)
            continue
        selected.append(routine)

    exercises: list[WorkoutExercise] = []
    for routine in selected:
        for routine_exercise in sorted(routine.exercises, key=lambda e: e.order):
            exercises.append(
                convert_routine_exercise(routine_exercise, routine.id, len(exercises), clear_values)
            )

    return WorkoutSession(
        id=new_workout_id(),
        name=workout_name or default_workout_name([r.title for r in selected]),
        exercises=exercises,
        is_active=False,
        start_method=StartMethod.ROUTINES,
        source_routine_ids=[r.id for r in selected],
    )
