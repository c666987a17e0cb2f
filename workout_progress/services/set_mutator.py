"""Set mutation rules: create, update (with forward propagation), remove and auto-fill entries.

All functions operate in place on a single WorkoutExercise. Session-level checks
(active session, exercise lookup) belong to the session store.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from workout_progress.core.constants import MEASUREMENT_FIELDS, REQUIRED_FIELDS
from workout_progress.core.enums import ExerciseType
from workout_progress.core.errors import NotFound
from workout_progress.schemas.entry import EntrySeed, EntryValues, WorkingEntry
from workout_progress.schemas.workout import WorkoutExercise

# Fields a caller may change on a working entry (id and timestamp are fixed at creation)
UPDATABLE_FIELDS = frozenset(WorkingEntry.model_fields) - {"id", "timestamp"}


def new_entry_id() -> str:
    return f"wset_{uuid.uuid4().hex}"


def required_fields(exercise_type: ExerciseType | None) -> frozenset[str]:
    """Fields that are meaningful for this exercise type. Unknown types record reps only."""
    if exercise_type is None:
        return frozenset({"reps"})
    return REQUIRED_FIELDS.get(exercise_type, frozenset({"reps"}))


def relevant_values(entry: EntryValues, exercise_type: ExerciseType | None) -> dict[str, Any]:
    """Numeric fields of `entry`, with those irrelevant to the exercise type set to None."""
    needed = required_fields(exercise_type)
    return {f: (getattr(entry, f) if f in needed else None) for f in MEASUREMENT_FIELDS}


def find_entry_index(exercise: WorkoutExercise, entry_id: str) -> int:
    for i, entry in enumerate(exercise.entries):
        if entry.id == entry_id:
            return i
    raise NotFound(f"Set {entry_id} not found in exercise {exercise.id}")


def add_entry(
    exercise: WorkoutExercise,
    seed: EntrySeed | None = None,
    copy_forward: bool = True,
) -> WorkingEntry:
    """Append a new, not-completed entry.

    With `copy_forward`, numeric values of the last entry are carried over as
    defaults. Values explicitly present in `seed` win over copied ones.
    """
    values: dict[str, Any] = {}
    if copy_forward and exercise.entries:
        last = exercise.entries[-1]
        values = {f: getattr(last, f) for f in MEASUREMENT_FIELDS if getattr(last, f) is not None}
    if seed is not None:
        values.update(seed.model_dump(exclude_unset=True))
    entry = WorkingEntry(id=new_entry_id(), is_completed=False, **values)
    exercise.entries.append(entry)
    return entry


def propagate_values(
    entries: Sequence[WorkingEntry],
    index: int,
    values: Mapping[str, Any],
) -> list[str]:
    """Copy numeric `values` from entry `index` into later entries that still lack them.

    Completed entries and fields that already hold a value are never touched.
    Returns the ids of entries that changed.
    """
    fields = {f: v for f, v in values.items() if f in MEASUREMENT_FIELDS and v is not None}
    if not fields:
        return []
    changed_ids: list[str] = []
    for entry in entries[index + 1 :]:
        if entry.is_completed:
            continue
        changed = False
        for field, value in fields.items():
            if getattr(entry, field) is None:
                setattr(entry, field, value)
                changed = True
        if changed:
            changed_ids.append(entry.id)
    return changed_ids


def update_entry(
    exercise: WorkoutExercise,
    entry_id: str,
    updates: BaseModel | Mapping[str, Any],
) -> WorkingEntry:
    """Merge `updates` into the entry, then propagate numeric fields forward.

    Propagation is skipped when the same update marks the entry completed.
    """
    if isinstance(updates, BaseModel):
        data = updates.model_dump(exclude_unset=True)
    else:
        data = dict(updates)
    data = {k: v for k, v in data.items() if k in UPDATABLE_FIELDS}

    index = find_entry_index(exercise, entry_id)
    merged = exercise.entries[index].model_copy(update=data)
    exercise.entries[index] = merged

    touched = {f: data[f] for f in MEASUREMENT_FIELDS if f in data}
    if touched and not data.get("is_completed"):
        propagate_values(exercise.entries, index, touched)
    return merged


def remove_entry(exercise: WorkoutExercise, entry_id: str) -> WorkingEntry:
    """Delete an entry. Remaining ids are kept; display order is list order."""
    index = find_entry_index(exercise, entry_id)
    return exercise.entries.pop(index)


def missing_required_fields(entry: EntryValues, exercise_type: ExerciseType | None) -> list[str]:
    """Required fields that are empty or not positive."""
    needed = required_fields(exercise_type)
    missing = []
    for field in MEASUREMENT_FIELDS:
        if field not in needed:
            continue
        value = getattr(entry, field)
        if value is None or value <= 0:
            missing.append(field)
    return missing


def _positive(value: Any) -> bool:
    return value is not None and value > 0


def autofill_values(
    exercise: WorkoutExercise,
    entry_id: str,
    exercise_type: ExerciseType | None,
    previous_entries: Sequence[EntryValues] = (),
) -> dict[str, Any]:
    """Values for the entry's missing required fields, taken from nearby data.

    Sources, in order: the last completed entry of this exercise, otherwise the
    same-index entry of the previous session (or its first entry); then, for
    anything still missing, the nearest earlier entry holding a positive value.
    """
    index = find_entry_index(exercise, entry_id)
    missing = missing_required_fields(exercise.entries[index], exercise_type)
    if not missing:
        return {}

    filled: dict[str, Any] = {}
    completed = [e for e in exercise.entries if e.is_completed and e.id != entry_id]
    source: EntryValues | None = None
    if completed:
        source = completed[-1]
    elif previous_entries:
        source = previous_entries[index] if index < len(previous_entries) else previous_entries[0]
    if source is not None:
        for field in missing:
            value = getattr(source, field)
            if _positive(value):
                filled[field] = value

    for field in missing:
        if field in filled:
            continue
        for earlier in reversed(exercise.entries[:index]):
            value = getattr(earlier, field)
            if _positive(value):
                filled[field] = value
                break
    return filled
