"""Routines - saved workout templates, the public catalog, and stacking into a workout."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from workout_progress.api.deps import get_resolver, get_store
from workout_progress.core.config import get_settings
from workout_progress.core.errors import NotFound, ValidationFailed
from workout_progress.db.session import get_db
from workout_progress.schemas.routine import Routine, RoutineCreate, RoutineStackRequest, RoutineUpdate
from workout_progress.schemas.workout import WorkoutSession
from workout_progress.services import records
from workout_progress.services.routine_library import new_routine, updated_routine
from workout_progress.services.routine_stacker import stack_routines
from workout_progress.services.session_store import WorkoutSessionStore
from workout_progress.services.template_resolution import TemplateResolver

router = APIRouter()
settings = get_settings()


@router.get("", response_model=list[Routine])
async def list_my_routines(db: AsyncSession = Depends(get_db)):
    """User routines, newest first."""
    return await records.list_routines(db)


@router.get("/public", response_model=list[Routine])
async def list_public_routines(resolver: TemplateResolver = Depends(get_resolver)):
    """Built-in routines with placeholder exercises resolved against the catalog."""
    return await resolver.public_routines()


@router.post("", response_model=Routine, status_code=201)
async def create_routine(
    payload: RoutineCreate,
    db: AsyncSession = Depends(get_db),
):
    routine = new_routine(payload)
    await records.insert_routine(db, routine)
    return routine


@router.post("/stack", response_model=WorkoutSession, status_code=201)
async def stack_into_workout(
    payload: RoutineStackRequest,
    db: AsyncSession = Depends(get_db),
    store: WorkoutSessionStore = Depends(get_store),
    resolver: TemplateResolver = Depends(get_resolver),
):
    """
    Start a workout from one or more routines (mine or public), in the given
    order. Unknown ids are skipped; 404 if none of them exist.
    """
    all_routines = [*await records.list_routines(db), *await resolver.public_routines()]
    session = stack_routines(
        payload.routine_ids,
        all_routines,
        clear_values=payload.clear_values,
        workout_name=payload.workout_name,
    )
    if not session.source_routine_ids:
        raise NotFound("None of the requested routines exist")
    if len(session.exercises) > settings.max_exercises_per_session:
        raise ValidationFailed(
            f"Stacked workout has {len(session.exercises)} exercises; "
            f"maximum is {settings.max_exercises_per_session}",
            fields=["routine_ids"],
        )
    return store.install(session)


@router.get("/{routine_id}", response_model=Routine)
async def get_routine(
    routine_id: str,
    db: AsyncSession = Depends(get_db),
    resolver: TemplateResolver = Depends(get_resolver),
):
    row = await records.get_routine_row(db, routine_id)
    if row is not None:
        return records.routine_from_row(row)
    for routine in await resolver.public_routines():
        if routine.id == routine_id:
            return routine
    raise HTTPException(status_code=404, detail="Routine not found")


@router.put("/{routine_id}", response_model=Routine)
async def update_routine(
    routine_id: str,
    payload: RoutineUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Partial update. Replacing exercises replaces all their sets. Public routines are read-only."""
    row = await records.get_routine_row(db, routine_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Routine not found")
    routine = updated_routine(records.routine_from_row(row), payload)
    row.title = routine.title
    row.description = routine.description
    row.version = routine.version
    row.updated_at = routine.updated_at
    if payload.exercises is not None:
        row.exercises = records.routine_exercise_rows(routine)
    await db.flush()
    return routine


@router.delete("/{routine_id}", status_code=204)
async def delete_routine(
    routine_id: str,
    db: AsyncSession = Depends(get_db),
):
    row = await records.get_routine_row(db, routine_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Routine not found")
    await db.delete(row)
    await db.flush()
    return Response(status_code=204)
