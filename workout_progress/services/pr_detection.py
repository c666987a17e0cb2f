"""PR detection: flag an entry as PR if its PR value beats every earlier entry for that exercise."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import TypeVar

from workout_progress.core.enums import ExerciseType
from workout_progress.schemas.entry import EntryValues, LoggedEntry, WorkingEntry

E = TypeVar("E", LoggedEntry, WorkingEntry)


def pr_value(entry: EntryValues, exercise_type: ExerciseType | None) -> float:
    """
    Single comparable number per exercise type: the product of the type's
    relevant fields (RPE never participates). Missing fields count as 0.
    """
    weight = float(entry.weight or 0)
    reps = float(entry.reps or 0)
    duration = float(entry.duration or 0)
    distance = float(entry.distance or 0)

    if exercise_type in (
        ExerciseType.WEIGHT_REPS,
        ExerciseType.WEIGHTED_BODYWEIGHT,
        ExerciseType.ASSISTED_BODYWEIGHT,
    ):
        return weight * reps
    if exercise_type == ExerciseType.REPS_ONLY:
        return reps
    if exercise_type == ExerciseType.DURATION:
        return duration
    if exercise_type == ExerciseType.WEIGHT_DURATION:
        return weight * duration
    if exercise_type == ExerciseType.DISTANCE_DURATION:
        return distance * duration
    if exercise_type == ExerciseType.WEIGHT_DISTANCE:
        return weight * distance
    return 0.0


def best_pr_value(entries: Iterable[EntryValues], exercise_type: ExerciseType | None) -> float:
    return max((pr_value(e, exercise_type) for e in entries), default=0.0)


def is_pr(
    candidate: EntryValues,
    exercise_type: ExerciseType | None,
    historical_entries: Iterable[EntryValues],
) -> bool:
    """
    True iff the candidate's PR value is positive and strictly greater than the
    best among `historical_entries` (entries from before the candidate).
    """
    value = pr_value(candidate, exercise_type)
    if value <= 0:
        return False
    return value > best_pr_value(historical_entries, exercise_type)


def find_current_pr(
    entries: Iterable[LoggedEntry],
    exercise_type: ExerciseType | None,
) -> LoggedEntry | None:
    """The earliest entry holding the highest positive PR value, if any."""
    best: LoggedEntry | None = None
    best_value = 0.0
    for entry in chronological(entries):
        value = pr_value(entry, exercise_type)
        if value > best_value:
            best, best_value = entry, value
    return best


def chronological(entries: Iterable[E]) -> list[E]:
    """Stable sort by timestamp (ties keep their given order)."""
    return sorted(entries, key=lambda e: e.timestamp)


def flag_prs(entries: Iterable[LoggedEntry], exercise_type: ExerciseType | None) -> list[LoggedEntry]:
    """Recompute PR flags for a whole exercise history in chronological order."""
    ordered = chronological(entries)
    result: list[LoggedEntry] = []
    best = 0.0
    for entry in ordered:
        value = pr_value(entry, exercise_type)
        flagged = value > 0 and value > best
        result.append(entry.model_copy(update={"is_pr": flagged, "pr_value": value}))
        best = max(best, value)
    return result


def recompute_after_removal(
    removed_timestamp: datetime,
    all_entries: Sequence[LoggedEntry],
    exercise_type: ExerciseType | None,
    removed_id: str | None = None,
) -> list[LoggedEntry]:
    """
    Recalculate PR flags after a logged entry is deleted.

    The removed entry is dropped (by id when given, otherwise by timestamp).
    Every remaining entry later than it gets its flag cleared and re-evaluated,
    in chronological order, against all entries before it in the adjusted
    history. Earlier entries are returned unchanged. Result is chronological.
    """
    if removed_id is not None:
        remaining = [e for e in all_entries if e.id != removed_id]
    else:
        remaining = [e for e in all_entries if e.timestamp != removed_timestamp]

    ordered = chronological(remaining)
    result: list[LoggedEntry] = []
    for i, entry in enumerate(ordered):
        if entry.timestamp <= removed_timestamp:
            result.append(entry)
            continue
        value = pr_value(entry, exercise_type)
        flagged = is_pr(entry, exercise_type, ordered[:i])
        result.append(entry.model_copy(update={"is_pr": flagged, "pr_value": value}))
    return result


def evaluate_working_prs(
    entries: Sequence[WorkingEntry],
    exercise_type: ExerciseType | None,
    historical_entries: Sequence[LoggedEntry],
) -> dict[str, tuple[bool, float]]:
    """
    PR status of each completed working entry of one exercise, keyed by entry id.

    Entries are walked in timestamp order (the order they will have once
    logged), each against history plus the completed entries before it, so
    the outcome does not depend on which set was completed first.
    """
    earlier: list[EntryValues] = list(historical_entries)
    status: dict[str, tuple[bool, float]] = {}
    for entry in chronological(entries):
        if not entry.is_completed or entry.rpe is None:
            continue
        status[entry.id] = (is_pr(entry, exercise_type, earlier), pr_value(entry, exercise_type))
        earlier.append(entry)
    return status
