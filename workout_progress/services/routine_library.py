"""User routine editing rules: build, update and validate routines from request payloads."""

from __future__ import annotations

import uuid
from collections.abc import Iterable

from workout_progress.core.enums import RoutineSource
from workout_progress.core.errors import ValidationFailed
from workout_progress.schemas.entry import utcnow
from workout_progress.schemas.routine import (
    Routine,
    RoutineCreate,
    RoutineExercise,
    RoutineExerciseInput,
    RoutineSet,
    RoutineUpdate,
)


def new_routine_id() -> str:
    return f"routine_{uuid.uuid4().hex}"


def _require_title(title: str | None) -> str:
    if title is None or not title.strip():
        raise ValidationFailed("Title is required", fields=["title"])
    return title.strip()


def build_exercises(inputs: Iterable[RoutineExerciseInput]) -> list[RoutineExercise]:
    """Fresh ids for every exercise and set; order follows the payload."""
    exercises = []
    for order, item in enumerate(inputs):
        sets = item.sets or []
        exercises.append(
            RoutineExercise(
                id=uuid.uuid4().hex,
                exercise_id=item.exercise_id,
                exercise_details=item.exercise_details,
                notes=item.notes,
                order=order,
                sets=[RoutineSet(id=uuid.uuid4().hex, **s.model_dump()) for s in sets]
                or [RoutineSet(id=uuid.uuid4().hex)],
            )
        )
    return exercises


def new_routine(payload: RoutineCreate) -> Routine:
    now = utcnow()
    return Routine(
        id=new_routine_id(),
        title=_require_title(payload.title),
        description=payload.description,
        exercises=build_exercises(payload.exercises),
        created_at=now,
        updated_at=now,
        version=1,
        source=RoutineSource.MY,
    )


def updated_routine(current: Routine, payload: RoutineUpdate) -> Routine:
    """Apply a partial update; bumps the version and updated_at."""
    changes: dict = {"version": current.version + 1, "updated_at": utcnow()}
    data = payload.model_dump(exclude_unset=True)
    if "title" in data:
        changes["title"] = _require_title(payload.title)
    if "description" in data:
        changes["description"] = payload.description
    if payload.exercises is not None:
        changes["exercises"] = build_exercises(payload.exercises)
    return current.model_copy(update=changes)
