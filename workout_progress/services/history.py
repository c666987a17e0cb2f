"""Workout history: logged sets, finished sessions and exercise notes held in memory.

This is the durable output of the engine. The HTTP layer loads it from the
database at startup and writes every change through to the database.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime

from workout_progress.core.enums import ExerciseType
from workout_progress.core.errors import NotFound, ValidationFailed
from workout_progress.schemas.entry import LoggedEntry
from workout_progress.schemas.workout import ExerciseNote, FinishResult, WorkoutSummary
from workout_progress.services.pr_detection import chronological, flag_prs, recompute_after_removal

logger = logging.getLogger(__name__)


class WorkoutHistory:
    def __init__(
        self,
        logged_entries: Iterable[LoggedEntry] = (),
        sessions: Iterable[WorkoutSummary] = (),
        exercise_notes: Iterable[ExerciseNote] = (),
    ):
        self._entries: list[LoggedEntry] = list(logged_entries)
        self._sessions: list[WorkoutSummary] = list(sessions)
        self._notes: list[ExerciseNote] = list(exercise_notes)

    @property
    def logged_entries(self) -> list[LoggedEntry]:
        return list(self._entries)

    @property
    def sessions(self) -> list[WorkoutSummary]:
        """Finished sessions, most recent first."""
        return sorted(self._sessions, key=lambda s: s.start_time, reverse=True)

    @property
    def exercise_notes(self) -> list[ExerciseNote]:
        return list(self._notes)

    def record(self, result: FinishResult) -> None:
        self._sessions.append(result.summary)
        self._entries.extend(result.logged_entries)
        self._notes.extend(result.exercise_notes)

    def get_session(self, session_id: str) -> WorkoutSummary:
        for summary in self._sessions:
            if summary.id == session_id:
                return summary
        raise NotFound(f"Workout session {session_id} not found")

    def set_session_xp(self, session_id: str, total_xp: int) -> None:
        summary = self.get_session(session_id)
        summary.total_xp = total_xp

    def get_entry(self, entry_id: str) -> LoggedEntry:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        raise NotFound(f"Logged set {entry_id} not found")

    def entries_for_exercise(self, exercise_id: str) -> list[LoggedEntry]:
        """All logged sets of one exercise, oldest first."""
        return chronological(e for e in self._entries if e.exercise_id == exercise_id)

    def last_session_entries(self, exercise_id: str, exclude_session_id: str | None = None) -> list[LoggedEntry]:
        """Sets of the exercise from the most recent session that included it, oldest first."""
        entries = [
            e
            for e in self.entries_for_exercise(exercise_id)
            if exclude_session_id is None or e.workout_session_id != exclude_session_id
        ]
        if not entries:
            return []
        latest_session = entries[-1].workout_session_id
        return [e for e in entries if e.workout_session_id == latest_session]

    def latest_note(self, exercise_id: str) -> ExerciseNote | None:
        notes = [n for n in self._notes if n.exercise_id == exercise_id]
        return max(notes, key=lambda n: n.timestamp) if notes else None

    def pr_entries(self, since: datetime) -> list[LoggedEntry]:
        """PR-flagged sets logged at or after `since`, most recent first."""
        flagged = [e for e in self._entries if e.is_pr and e.timestamp >= since]
        return sorted(flagged, key=lambda e: e.timestamp, reverse=True)

    def workout_dates(self) -> list[date]:
        """Distinct session dates, most recent first."""
        return sorted({s.date for s in self._sessions}, reverse=True)

    def apply_changes(self, changed: Iterable[LoggedEntry], removed_id: str | None = None) -> None:
        """Swap in re-flagged sets by id, add new ones, and drop `removed_id`."""
        pending = {e.id: e for e in changed}
        kept = [pending.pop(e.id, e) for e in self._entries if e.id != removed_id]
        self._entries = kept + list(pending.values())

    def plan_removal(
        self, entry_id: str, exercise_type: ExerciseType | None
    ) -> tuple[LoggedEntry, list[LoggedEntry]]:
        """The set `remove_entry` would delete and the sets whose PR state would change. Nothing is modified."""
        removed = self.get_entry(entry_id)
        before = {e.id: (e.is_pr, e.pr_value) for e in self.entries_for_exercise(removed.exercise_id)}
        updated = recompute_after_removal(
            removed.timestamp,
            self.entries_for_exercise(removed.exercise_id),
            exercise_type,
            removed_id=removed.id,
        )
        return removed, [e for e in updated if before.get(e.id) != (e.is_pr, e.pr_value)]

    def remove_entry(self, entry_id: str, exercise_type: ExerciseType | None) -> tuple[LoggedEntry, list[LoggedEntry]]:
        """
        Delete a logged set and recompute PR flags of later sets of the same
        exercise. Returns the removed set and the sets whose PR state changed.
        """
        removed, changed = self.plan_removal(entry_id, exercise_type)
        self.apply_changes(changed, removed_id=removed.id)
        logger.info(
            "Removed logged set %s of %s; %d later sets re-flagged", entry_id, removed.exercise_id, len(changed)
        )
        return removed, changed

    def plan_restore(self, entry: LoggedEntry, exercise_type: ExerciseType | None) -> list[LoggedEntry]:
        """Sets whose PR state would change if `entry` were put back, the entry included. Nothing is modified."""
        if any(e.id == entry.id for e in self._entries):
            raise ValidationFailed(f"Logged set {entry.id} already exists")
        before = {e.id: (e.is_pr, e.pr_value) for e in self.entries_for_exercise(entry.exercise_id)}
        updated = flag_prs([*self.entries_for_exercise(entry.exercise_id), entry], exercise_type)
        return [e for e in updated if before.get(e.id) != (e.is_pr, e.pr_value)]

    def restore_entry(self, entry: LoggedEntry, exercise_type: ExerciseType | None) -> list[LoggedEntry]:
        """Put a removed set back and recompute the exercise's PR flags. Returns sets whose PR state changed."""
        changed = self.plan_restore(entry, exercise_type)
        self.apply_changes(changed)
        return changed
