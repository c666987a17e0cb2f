"""Active workout endpoints - thin layer over the session store."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, BackgroundTasks, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from workout_progress.api.deps import get_catalog, get_progress_lock, get_store
from workout_progress.core.config import get_settings
from workout_progress.core.errors import NoActiveSession, ValidationFailed
from workout_progress.db.session import async_session_maker, get_db
from workout_progress.schemas.entry import EntryComplete, EntrySeed, EntryUpdate, WorkingEntry
from workout_progress.schemas.workout import (
    EntryCreate,
    ExerciseNotesUpdate,
    ExerciseReplace,
    ExercisesAdd,
    FinishResult,
    WorkoutExercise,
    WorkoutFinish,
    WorkoutSession,
    WorkoutStart,
    WorkoutStats,
)
from workout_progress.services import records
from workout_progress.services.catalog import ExerciseCatalog, details_by_id
from workout_progress.services.enrichment import enrich_finished_workout
from workout_progress.services.session_store import WorkoutSessionStore

router = APIRouter()
settings = get_settings()


@router.get("", response_model=WorkoutSession | None)
async def get_active_workout(store: WorkoutSessionStore = Depends(get_store)):
    """The active workout, or null when none is in progress."""
    return store.session if store.is_active else None


@router.post("/start", response_model=WorkoutSession, status_code=201)
async def start_workout(
    payload: WorkoutStart,
    store: WorkoutSessionStore = Depends(get_store),
):
    """Start an empty workout. 409 if one is already active."""
    return store.start(name=payload.name, start_method=payload.start_method)


@router.post("/discard", status_code=204)
async def discard_workout(store: WorkoutSessionStore = Depends(get_store)):
    store.discard()
    return Response(status_code=204)


@router.get("/stats", response_model=WorkoutStats)
async def workout_stats(store: WorkoutSessionStore = Depends(get_store)):
    return store.stats()


@router.post("/finish", response_model=FinishResult)
async def finish_workout(
    payload: WorkoutFinish,
    background_tasks: BackgroundTasks,
    store: WorkoutSessionStore = Depends(get_store),
    catalog: ExerciseCatalog = Depends(get_catalog),
    progress_lock: asyncio.Lock = Depends(get_progress_lock),
    db: AsyncSession = Depends(get_db),
):
    """
    Freeze the workout and return its summary. XP is computed afterwards in a
    background task; the summary's total_xp is filled in once that completes.
    """
    session = store.session
    if session is None or not store.is_active:
        raise NoActiveSession()
    if not any(e.is_completed for ex in session.exercises for e in ex.entries):
        raise ValidationFailed("Complete at least one set before finishing")

    # The workout stays active until it is committed; a failed write loses nothing
    result = store.summarize(name=payload.name)
    await records.save_finished_workout(db, result)
    await db.commit()
    store.close(result)
    background_tasks.add_task(
        enrich_finished_workout,
        result,
        catalog,
        async_session_maker,
        store.history,
        settings.default_muscle_goal,
        progress_lock,
    )
    return result


# Exercises


@router.post("/exercises", response_model=list[WorkoutExercise], status_code=201)
async def add_exercises(
    payload: ExercisesAdd,
    store: WorkoutSessionStore = Depends(get_store),
    catalog: ExerciseCatalog = Depends(get_catalog),
):
    """Add catalog exercises; each starts with as many sets as last time (or one)."""
    session = store.session
    if session is None or not store.is_active:
        raise NoActiveSession()
    if len(session.exercises) + len(payload.exercise_ids) > settings.max_exercises_per_session:
        raise ValidationFailed(
            f"Maximum {settings.max_exercises_per_session} exercises per workout",
            fields=["exercise_ids"],
        )
    details = await details_by_id(catalog, payload.exercise_ids)
    return store.add_exercises(payload.exercise_ids, details)


@router.put("/exercises/{workout_exercise_id}", response_model=WorkoutExercise)
async def replace_exercise(
    workout_exercise_id: str,
    payload: ExerciseReplace,
    store: WorkoutSessionStore = Depends(get_store),
    catalog: ExerciseCatalog = Depends(get_catalog),
):
    """Swap in another catalog exercise; sets are re-seeded and notes dropped."""
    store.get_exercise(workout_exercise_id)
    details = await details_by_id(catalog, [payload.exercise_id])
    return store.replace_exercise(workout_exercise_id, payload.exercise_id, details[payload.exercise_id])


@router.delete("/exercises/{workout_exercise_id}", status_code=204)
async def remove_exercise(
    workout_exercise_id: str,
    store: WorkoutSessionStore = Depends(get_store),
):
    store.remove_exercise(workout_exercise_id)
    return Response(status_code=204)


@router.put("/exercises/{workout_exercise_id}/notes", response_model=WorkoutExercise)
async def update_exercise_notes(
    workout_exercise_id: str,
    payload: ExerciseNotesUpdate,
    store: WorkoutSessionStore = Depends(get_store),
):
    return store.update_notes(workout_exercise_id, payload.notes)


# Sets


@router.post("/exercises/{workout_exercise_id}/sets", response_model=WorkingEntry, status_code=201)
async def add_set(
    workout_exercise_id: str,
    payload: EntryCreate,
    store: WorkoutSessionStore = Depends(get_store),
):
    """Append a set; by default the previous set's values are copied forward."""
    exercise = store.get_exercise(workout_exercise_id)
    if len(exercise.entries) >= settings.max_entries_per_exercise:
        raise ValidationFailed(f"Maximum {settings.max_entries_per_exercise} sets per exercise")
    seed = EntrySeed(**payload.model_dump(exclude_unset=True, exclude={"copy_forward"}))
    return store.add_entry(workout_exercise_id, seed, copy_forward=payload.copy_forward)


@router.patch("/exercises/{workout_exercise_id}/sets/{entry_id}", response_model=WorkoutExercise)
async def update_set(
    workout_exercise_id: str,
    entry_id: str,
    payload: EntryUpdate,
    store: WorkoutSessionStore = Depends(get_store),
):
    """Update a set. Returns the whole exercise since later sets may receive propagated values."""
    store.update_entry(workout_exercise_id, entry_id, payload)
    return store.get_exercise(workout_exercise_id)


@router.delete("/exercises/{workout_exercise_id}/sets/{entry_id}", status_code=204)
async def remove_set(
    workout_exercise_id: str,
    entry_id: str,
    store: WorkoutSessionStore = Depends(get_store),
):
    store.remove_entry(workout_exercise_id, entry_id)
    return Response(status_code=204)


@router.post("/exercises/{workout_exercise_id}/sets/{entry_id}/complete", response_model=WorkingEntry)
async def complete_set(
    workout_exercise_id: str,
    entry_id: str,
    payload: EntryComplete,
    store: WorkoutSessionStore = Depends(get_store),
):
    """Mark a set done with its RPE; 400 lists required values that could not be filled."""
    return store.complete_entry(workout_exercise_id, entry_id, payload.rpe)


@router.post("/exercises/{workout_exercise_id}/sets/{entry_id}/undo", response_model=WorkoutExercise)
async def undo_set(
    workout_exercise_id: str,
    entry_id: str,
    store: WorkoutSessionStore = Depends(get_store),
):
    store.undo_entry(workout_exercise_id, entry_id)
    return store.get_exercise(workout_exercise_id)
