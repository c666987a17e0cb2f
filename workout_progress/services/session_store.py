"""Active workout state machine.

Inactive --start()/install()--> Active --finish()/discard()--> Inactive

At most one session is active per store. Every mutation requires an active
session (NoActiveSession) and raises NotFound for unknown exercise or set ids.
Workout exercises are addressed by their instance id, so the same catalog
exercise can appear twice in one session.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from workout_progress.core.constants import DEFAULT_EXERCISE_TYPE, RPE_MAX, RPE_MIN
from workout_progress.core.enums import ExerciseType, StartMethod
from workout_progress.core.errors import NoActiveSession, NotFound, SessionAlreadyActive, ValidationFailed
from workout_progress.schemas.catalog import ExerciseDetails
from workout_progress.schemas.entry import EntrySeed, LoggedEntry, WorkingEntry, utcnow
from workout_progress.schemas.workout import (
    ExerciseNote,
    FinishResult,
    WorkoutExercise,
    WorkoutSession,
    WorkoutStats,
    WorkoutSummary,
)
from workout_progress.services import set_mutator
from workout_progress.services.history import WorkoutHistory
from workout_progress.services.pr_detection import evaluate_working_prs

# Set fields only the store derives; callers cannot write them directly
DERIVED_FIELDS = frozenset({"is_pr", "pr_value"})

logger = logging.getLogger(__name__)


def new_workout_id() -> str:
    return f"workout_{uuid.uuid4().hex}"


def new_workout_exercise_id() -> str:
    return f"wex_{uuid.uuid4().hex}"


def exercise_type_of(exercise: WorkoutExercise) -> ExerciseType:
    if exercise.exercise_details is not None:
        return exercise.exercise_details.exercise_type
    return DEFAULT_EXERCISE_TYPE


def entry_volume(entry: WorkingEntry, exercise_type: ExerciseType) -> float:
    """weight x reps, only for types that record both."""
    values = set_mutator.relevant_values(entry, exercise_type)
    if values["weight"] is None or values["reps"] is None:
        return 0.0
    return float(values["weight"]) * values["reps"]


class WorkoutSessionStore:
    """Owns the single active workout and turns it into history on finish."""

    def __init__(
        self,
        history: WorkoutHistory | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.history = history if history is not None else WorkoutHistory()
        self._clock = clock
        self._session: WorkoutSession | None = None

    @property
    def session(self) -> WorkoutSession | None:
        return self._session

    @property
    def is_active(self) -> bool:
        return self._session is not None and self._session.is_active

    def _require_active(self) -> WorkoutSession:
        if not self.is_active:
            raise NoActiveSession()
        return self._session

    def get_exercise(self, workout_exercise_id: str) -> WorkoutExercise:
        session = self._require_active()
        for exercise in session.exercises:
            if exercise.id == workout_exercise_id:
                return exercise
        raise NotFound(f"Exercise {workout_exercise_id} not found in workout")

    # Lifecycle

    def start(
        self,
        name: str | None = None,
        start_method: StartMethod = StartMethod.MANUAL,
        source_routine_ids: Iterable[str] = (),
    ) -> WorkoutSession:
        if self.is_active:
            raise SessionAlreadyActive()
        self._session = WorkoutSession(
            id=new_workout_id(),
            name=name,
            start_time=self._clock(),
            is_active=True,
            start_method=start_method,
            source_routine_ids=list(source_routine_ids),
        )
        logger.info("Started workout %s (%s)", self._session.id, start_method.value)
        return self._session

    def install(self, session: WorkoutSession) -> WorkoutSession:
        """Make a prepared session (e.g. stacked routines) the active one."""
        if self.is_active:
            raise SessionAlreadyActive()
        self._session = session.model_copy(update={"is_active": True, "start_time": self._clock()})
        logger.info(
            "Started workout %s from %d routine(s) with %d exercises",
            self._session.id,
            len(self._session.source_routine_ids),
            len(self._session.exercises),
        )
        return self._session

    def discard(self) -> None:
        if self._session is not None:
            logger.info("Discarded workout %s", self._session.id)
        self._session = None

    # Exercises

    def _seed_entries(self, exercise_id: str) -> list[WorkingEntry]:
        """As many empty sets as the last session that used this exercise, or one."""
        previous = self.history.last_session_entries(exercise_id)
        return [WorkingEntry(id=set_mutator.new_entry_id()) for _ in range(len(previous) or 1)]

    def add_exercises(
        self,
        exercise_ids: Iterable[str],
        details_by_id: Mapping[str, ExerciseDetails] | None = None,
    ) -> list[WorkoutExercise]:
        session = self._require_active()
        details_by_id = details_by_id or {}
        added = []
        for exercise_id in exercise_ids:
            exercise = WorkoutExercise(
                id=new_workout_exercise_id(),
                exercise_id=exercise_id,
                exercise_details=details_by_id.get(exercise_id),
                entries=self._seed_entries(exercise_id),
                order=len(session.exercises),
            )
            session.exercises.append(exercise)
            added.append(exercise)
        return added

    def remove_exercise(self, workout_exercise_id: str) -> WorkoutExercise:
        session = self._require_active()
        exercise = self.get_exercise(workout_exercise_id)
        session.exercises.remove(exercise)
        for order, remaining in enumerate(session.exercises):
            remaining.order = order
        self._reflag_prs(exercise.exercise_id)
        return exercise

    def replace_exercise(
        self,
        workout_exercise_id: str,
        new_exercise_id: str,
        details: ExerciseDetails | None = None,
    ) -> WorkoutExercise:
        """Swap the catalog exercise in place; sets are re-seeded and notes dropped."""
        session = self._require_active()
        old = self.get_exercise(workout_exercise_id)
        replacement = WorkoutExercise(
            id=old.id,
            exercise_id=new_exercise_id,
            exercise_details=details,
            entries=self._seed_entries(new_exercise_id),
            order=old.order,
            notes=None,
            from_routine_id=old.from_routine_id,
        )
        session.exercises[session.exercises.index(old)] = replacement
        self._reflag_prs(old.exercise_id)
        return replacement

    def update_notes(self, workout_exercise_id: str, notes: str | None) -> WorkoutExercise:
        exercise = self.get_exercise(workout_exercise_id)
        exercise.notes = notes
        return exercise

    # Sets

    def add_entry(
        self,
        workout_exercise_id: str,
        seed: EntrySeed | None = None,
        copy_forward: bool = True,
    ) -> WorkingEntry:
        return set_mutator.add_entry(self.get_exercise(workout_exercise_id), seed, copy_forward)

    def update_entry(
        self,
        workout_exercise_id: str,
        entry_id: str,
        updates: BaseModel | Mapping[str, Any],
    ) -> WorkingEntry:
        """Apply a partial update; PR flags of the exercise follow the new values."""
        exercise = self.get_exercise(workout_exercise_id)
        if isinstance(updates, BaseModel):
            updates = updates.model_dump(exclude_unset=True)
        data = {k: v for k, v in updates.items() if k not in DERIVED_FIELDS}
        updated = set_mutator.update_entry(exercise, entry_id, data)
        self._reflag_prs(exercise.exercise_id)
        return updated

    def remove_entry(self, workout_exercise_id: str, entry_id: str) -> WorkingEntry:
        exercise = self.get_exercise(workout_exercise_id)
        removed = set_mutator.remove_entry(exercise, entry_id)
        self._reflag_prs(exercise.exercise_id)
        return removed

    def _pr_statuses(self, exercise_id: str) -> dict[str, tuple[bool, float]]:
        """PR status of every completed set of one catalog exercise across the session."""
        session = self._require_active()
        instances = [ex for ex in session.exercises if ex.exercise_id == exercise_id]
        if not instances:
            return {}
        return evaluate_working_prs(
            [e for ex in instances for e in ex.entries],
            exercise_type_of(instances[0]),
            self.history.entries_for_exercise(exercise_id),
        )

    def _reflag_prs(self, exercise_id: str) -> None:
        """Re-evaluate PR flags of all the exercise's sets in timestamp order."""
        statuses = self._pr_statuses(exercise_id)
        for exercise in self._session.exercises:
            if exercise.exercise_id != exercise_id:
                continue
            for entry in exercise.entries:
                entry.is_pr, entry.pr_value = statuses.get(entry.id, (None, None))

    def complete_entry(self, workout_exercise_id: str, entry_id: str, rpe: int) -> WorkingEntry:
        """
        Mark a set done with the given RPE. Missing required values are filled
        from nearby sets when possible; otherwise ValidationFailed names them.
        PR flags of the exercise are then re-evaluated in timestamp order, so
        completing an earlier set can take the flag away from a later one.
        """
        if not RPE_MIN <= rpe <= RPE_MAX:
            raise ValidationFailed(f"RPE must be between {RPE_MIN} and {RPE_MAX}", fields=["rpe"])
        exercise = self.get_exercise(workout_exercise_id)
        exercise_type = exercise_type_of(exercise)
        index = set_mutator.find_entry_index(exercise, entry_id)

        fill = set_mutator.autofill_values(
            exercise, entry_id, exercise_type, self.history.last_session_entries(exercise.exercise_id)
        )
        candidate = exercise.entries[index].model_copy(update=fill)
        missing = set_mutator.missing_required_fields(candidate, exercise_type)
        if missing:
            raise ValidationFailed(f"Missing values for: {', '.join(missing)}", fields=missing)

        completed = set_mutator.update_entry(exercise, entry_id, {**fill, "rpe": rpe, "is_completed": True})
        self._reflag_prs(exercise.exercise_id)
        return completed

    def undo_entry(self, workout_exercise_id: str, entry_id: str) -> WorkingEntry:
        """Un-complete a set and re-evaluate PR flags of the exercise's remaining completed sets."""
        exercise = self.get_exercise(workout_exercise_id)
        undone = set_mutator.update_entry(exercise, entry_id, {"is_completed": False, "rpe": None})
        self._reflag_prs(exercise.exercise_id)
        return undone

    # Summary

    def stats(self) -> WorkoutStats:
        session = self._require_active()
        elapsed = (self._clock() - session.start_time).total_seconds()
        completed = [
            (entry, exercise_type_of(exercise))
            for exercise in session.exercises
            for entry in exercise.entries
            if entry.is_completed
        ]
        return WorkoutStats(
            duration_seconds=max(0, int(elapsed)),
            total_volume=sum(entry_volume(e, t) for e, t in completed),
            completed_sets=len(completed),
        )

    def summarize(self, name: str | None = None) -> FinishResult:
        """
        The result of finishing now: summary plus the sets that would be logged.
        Only exercises with a completed set count; completed sets without an RPE
        are counted in the summary but not logged. Nothing is changed, so the
        caller can persist the result before calling `close`.
        """
        session = self._require_active()
        end_time = self._clock()
        day = end_time.date()
        performed = [ex for ex in session.exercises if any(e.is_completed for e in ex.entries)]

        # Flags and values come from the sets' current fields, never from stale state
        statuses: dict[str, tuple[bool, float]] = {}
        for exercise_id in dict.fromkeys(ex.exercise_id for ex in performed):
            statuses.update(self._pr_statuses(exercise_id))

        total_sets = 0
        total_volume = 0.0
        logged: list[LoggedEntry] = []
        notes: list[ExerciseNote] = []
        for exercise in performed:
            exercise_type = exercise_type_of(exercise)
            for entry in exercise.entries:
                if not entry.is_completed:
                    continue
                total_sets += 1
                total_volume += entry_volume(entry, exercise_type)
                if entry.rpe is None:
                    continue
                flagged, value = statuses[entry.id]
                logged.append(
                    LoggedEntry(
                        id=entry.id,
                        exercise_id=exercise.exercise_id,
                        workout_session_id=session.id,
                        rpe=entry.rpe,
                        timestamp=entry.timestamp,
                        date=day,
                        is_pr=flagged,
                        pr_value=value,
                        **set_mutator.relevant_values(entry, exercise_type),
                    )
                )
            if exercise.notes:
                notes.append(
                    ExerciseNote(
                        id=f"exercise_log_{uuid.uuid4().hex}",
                        exercise_id=exercise.exercise_id,
                        workout_session_id=session.id,
                        workout_date=day,
                        notes=exercise.notes,
                        timestamp=end_time,
                    )
                )

        summary = WorkoutSummary(
            id=session.id,
            name=name or session.name,
            start_time=session.start_time,
            end_time=end_time,
            date=day,
            exercise_ids=list(dict.fromkeys(ex.exercise_id for ex in performed)),
            total_sets=total_sets,
            total_volume=total_volume,
            start_method=session.start_method,
            source_routine_ids=list(session.source_routine_ids),
        )
        return FinishResult(summary=summary, logged_entries=logged, exercise_notes=notes)

    def close(self, result: FinishResult) -> None:
        """Record a summarized workout in history and end the session it came from."""
        self.history.record(result)
        if self._session is not None and self._session.id == result.summary.id:
            self._session = None
        logger.info(
            "Finished workout %s: %d sets, %d logged, volume %.1f",
            result.summary.id,
            result.summary.total_sets,
            len(result.logged_entries),
            result.summary.total_volume,
        )

    def finish(self, name: str | None = None) -> FinishResult:
        """Summarize and close in one step."""
        result = self.summarize(name)
        self.close(result)
        return result
