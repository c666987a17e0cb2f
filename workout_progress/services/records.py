"""Persistence of the engine's durable outputs: history, routines and muscle progress.

Thin async functions over an AsyncSession; callers own the transaction
(the `get_db` dependency commits, background jobs commit explicitly).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from workout_progress.models.progress import MuscleProgressState
from workout_progress.models.routine import Routine as RoutineRow
from workout_progress.models.routine import RoutineExercise as RoutineExerciseRow
from workout_progress.models.routine import RoutineSet as RoutineSetRow
from workout_progress.models.workout import ExerciseLog, LoggedSet, Workout
from workout_progress.schemas.catalog import ExerciseDetails
from workout_progress.schemas.entry import LoggedEntry
from workout_progress.schemas.progress import MuscleProgress
from workout_progress.schemas.routine import Routine, RoutineExercise, RoutineSet
from workout_progress.schemas.workout import ExerciseNote, FinishResult, WorkoutSummary
from workout_progress.services.history import WorkoutHistory


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# History


def _summary_from_row(row: Workout) -> WorkoutSummary:
    return WorkoutSummary(
        id=row.id,
        name=row.name,
        start_time=as_utc(row.start_time),
        end_time=as_utc(row.end_time),
        date=row.date,
        exercise_ids=list(row.exercise_ids or []),
        total_sets=row.total_sets or 0,
        total_volume=row.total_volume or 0.0,
        total_xp=row.total_xp or 0,
        start_method=row.start_method,
        source_routine_ids=list(row.source_routine_ids or []),
    )


def _entry_from_row(row: LoggedSet) -> LoggedEntry:
    entry = LoggedEntry.model_validate(row)
    return entry.model_copy(update={"timestamp": as_utc(entry.timestamp)})


def _note_from_row(row: ExerciseLog) -> ExerciseNote:
    note = ExerciseNote.model_validate(row)
    return note.model_copy(update={"timestamp": as_utc(note.timestamp)})


async def load_history(db: AsyncSession) -> WorkoutHistory:
    sessions = (await db.execute(select(Workout))).scalars().all()
    entries = (await db.execute(select(LoggedSet).order_by(LoggedSet.timestamp))).scalars().all()
    notes = (await db.execute(select(ExerciseLog))).scalars().all()
    return WorkoutHistory(
        logged_entries=[_entry_from_row(e) for e in entries],
        sessions=[_summary_from_row(s) for s in sessions],
        exercise_notes=[_note_from_row(n) for n in notes],
    )


def _logged_set_row(entry: LoggedEntry) -> LoggedSet:
    return LoggedSet(**entry.model_dump())


async def save_finished_workout(db: AsyncSession, result: FinishResult) -> Workout:
    summary = result.summary
    workout = Workout(
        id=summary.id,
        name=summary.name,
        start_time=summary.start_time,
        end_time=summary.end_time,
        date=summary.date,
        exercise_ids=list(summary.exercise_ids),
        total_sets=summary.total_sets,
        total_volume=summary.total_volume,
        total_xp=summary.total_xp,
        start_method=summary.start_method,
        source_routine_ids=list(summary.source_routine_ids),
    )
    db.add(workout)
    await db.flush()
    db.add_all(_logged_set_row(e) for e in result.logged_entries)
    db.add_all(ExerciseLog(**n.model_dump()) for n in result.exercise_notes)
    await db.flush()
    return workout


async def save_pr_flags(db: AsyncSession, entries: Iterable[LoggedEntry]) -> None:
    """Write back is_pr / pr_value for entries whose PR state was recomputed."""
    for entry in entries:
        row = await db.get(LoggedSet, entry.id)
        if row is None:
            continue
        row.is_pr = entry.is_pr
        row.pr_value = entry.pr_value
    await db.flush()


async def insert_logged_entry(db: AsyncSession, entry: LoggedEntry) -> LoggedSet:
    row = _logged_set_row(entry)
    db.add(row)
    await db.flush()
    return row


async def delete_logged_entry(db: AsyncSession, entry_id: str) -> None:
    await db.execute(delete(LoggedSet).where(LoggedSet.id == entry_id))
    await db.flush()


async def set_workout_xp(db: AsyncSession, session_id: str, total_xp: int) -> None:
    workout = await db.get(Workout, session_id)
    if workout is not None:
        workout.total_xp = total_xp
        await db.flush()


# Muscle progress


async def load_muscle_progress(db: AsyncSession, for_update: bool = False) -> dict[str, MuscleProgress]:
    """Stored progress by muscle id. `for_update` row-locks them (SQLite ignores it)."""
    query = select(MuscleProgressState)
    if for_update:
        query = query.with_for_update()
    rows = (await db.execute(query)).scalars().all()
    return {row.muscle_id: MuscleProgress.model_validate(row) for row in rows}


async def save_muscle_progress(db: AsyncSession, progress: Mapping[str, MuscleProgress]) -> None:
    """Upsert every muscle's progress row."""
    existing = {
        row.muscle_id: row
        for row in (await db.execute(select(MuscleProgressState))).scalars().all()
    }
    for muscle_id, value in progress.items():
        data = value.model_dump(exclude={"has_exercises"})
        row = existing.get(muscle_id)
        if row is None:
            db.add(MuscleProgressState(muscle_id=muscle_id, **data))
            continue
        for field, field_value in data.items():
            setattr(row, field, field_value)
    await db.flush()


# Routines


def routine_from_row(row: RoutineRow) -> Routine:
    return Routine(
        id=row.id,
        title=row.title,
        description=row.description,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
        version=row.version,
        exercises=[
            RoutineExercise(
                id=ex.id,
                exercise_id=ex.exercise_id,
                exercise_details=ExerciseDetails.model_validate(ex.exercise_details) if ex.exercise_details else None,
                notes=ex.notes,
                order=ex.order_in_routine,
                sets=[RoutineSet.model_validate(s) for s in ex.sets],
            )
            for ex in row.exercises
        ],
    )


def routine_exercise_rows(routine: Routine) -> list[RoutineExerciseRow]:
    rows = []
    for exercise in routine.exercises:
        rows.append(
            RoutineExerciseRow(
                id=exercise.id,
                routine_id=routine.id,
                exercise_id=exercise.exercise_id,
                exercise_details=exercise.exercise_details.model_dump(mode="json")
                if exercise.exercise_details
                else None,
                notes=exercise.notes,
                order_in_routine=exercise.order,
                sets=[
                    RoutineSetRow(set_order=i, **s.model_dump())
                    for i, s in enumerate(exercise.sets)
                ],
            )
        )
    return rows


def _routine_query():
    return select(RoutineRow).options(
        selectinload(RoutineRow.exercises).selectinload(RoutineExerciseRow.sets)
    )


async def list_routines(db: AsyncSession) -> list[Routine]:
    result = await db.execute(_routine_query().order_by(RoutineRow.created_at.desc()))
    return [routine_from_row(r) for r in result.scalars().all()]


async def get_routine_row(db: AsyncSession, routine_id: str) -> RoutineRow | None:
    result = await db.execute(_routine_query().where(RoutineRow.id == routine_id))
    return result.scalar_one_or_none()


async def insert_routine(db: AsyncSession, routine: Routine) -> RoutineRow:
    row = RoutineRow(
        id=routine.id,
        title=routine.title,
        description=routine.description,
        created_at=routine.created_at,
        updated_at=routine.updated_at,
        version=routine.version,
        exercises=routine_exercise_rows(routine),
    )
    db.add(row)
    await db.flush()
    return row
