"""Workout history: finished sessions, logged sets, previous session, and set removal.

Changes are committed to the database before the in-memory history is updated.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from workout_progress.api.deps import get_catalog, get_store
from workout_progress.core.enums import ExerciseType
from workout_progress.db.session import get_db
from workout_progress.schemas.entry import LoggedEntry
from workout_progress.schemas.workout import WorkoutSummary
from workout_progress.services import records
from workout_progress.services.catalog import ExerciseCatalog
from workout_progress.services.pr_detection import find_current_pr
from workout_progress.services.session_store import WorkoutSessionStore
from workout_progress.services.template_resolution import FALLBACK_EXERCISES, FALLBACK_PREFIX

router = APIRouter()


async def exercise_type_for(catalog: ExerciseCatalog, exercise_id: str) -> ExerciseType | None:
    """Type of a logged exercise; fallback exercises carry theirs statically."""
    if exercise_id.startswith(FALLBACK_PREFIX):
        fallback = FALLBACK_EXERCISES.get(exercise_id[len(FALLBACK_PREFIX):])
        return fallback.exercise_type if fallback else None
    exercise = await catalog.get_exercise(exercise_id)
    return exercise.exercise_type if exercise else None


@router.get("/sessions", response_model=list[WorkoutSummary])
async def list_sessions(
    store: WorkoutSessionStore = Depends(get_store),
    skip: int = 0,
    limit: int = 50,
):
    """Finished workouts, most recent first."""
    return store.history.sessions[skip : skip + limit]


@router.get("/sessions/{session_id}")
async def get_session(
    session_id: str,
    store: WorkoutSessionStore = Depends(get_store),
):
    """A finished workout with its logged sets and exercise notes."""
    summary = store.history.get_session(session_id)
    return {
        "summary": summary,
        "entries": [e for e in store.history.logged_entries if e.workout_session_id == session_id],
        "notes": [n for n in store.history.exercise_notes if n.workout_session_id == session_id],
    }


@router.get("/exercises/{exercise_id}/entries", response_model=list[LoggedEntry])
async def exercise_entries(
    exercise_id: str,
    store: WorkoutSessionStore = Depends(get_store),
):
    """Every logged set of the exercise, oldest first."""
    return store.history.entries_for_exercise(exercise_id)


@router.get("/exercises/{exercise_id}/previous-session")
async def previous_session(
    exercise_id: str,
    store: WorkoutSessionStore = Depends(get_store),
):
    """
    Sets from the most recent session that included this exercise, plus the
    notes written then and the current record-holding set.
    """
    history = store.history
    entries = history.last_session_entries(exercise_id)
    if not entries:
        return {
            "exercise_id": exercise_id,
            "workout_session_id": None,
            "entries": [],
            "notes": None,
            "current_pr": None,
        }
    session_id = entries[0].workout_session_id
    note = history.latest_note(exercise_id)
    current_pr = next(
        (e for e in reversed(history.entries_for_exercise(exercise_id)) if e.is_pr),
        None,
    )
    return {
        "exercise_id": exercise_id,
        "workout_session_id": session_id,
        "entries": entries,
        "notes": note.notes if note and note.workout_session_id == session_id else None,
        "current_pr": current_pr,
    }


@router.get("/exercises/{exercise_id}/best", response_model=LoggedEntry | None)
async def exercise_best(
    exercise_id: str,
    store: WorkoutSessionStore = Depends(get_store),
    catalog: ExerciseCatalog = Depends(get_catalog),
):
    """The earliest set holding the exercise's highest PR value."""
    exercise_type = await exercise_type_for(catalog, exercise_id)
    return find_current_pr(store.history.entries_for_exercise(exercise_id), exercise_type)


@router.delete("/entries/{entry_id}")
async def delete_logged_entry(
    entry_id: str,
    store: WorkoutSessionStore = Depends(get_store),
    catalog: ExerciseCatalog = Depends(get_catalog),
    db: AsyncSession = Depends(get_db),
):
    """
    Remove a logged set. Later sets of the same exercise get their PR flags
    recomputed; the response lists the sets whose flags changed.
    """
    entry = store.history.get_entry(entry_id)
    exercise_type = await exercise_type_for(catalog, entry.exercise_id)
    removed, changed = store.history.plan_removal(entry_id, exercise_type)
    await records.delete_logged_entry(db, removed.id)
    await records.save_pr_flags(db, changed)
    await db.commit()
    store.history.apply_changes(changed, removed_id=removed.id)
    return {"removed": removed, "updated": changed}


@router.post("/entries", status_code=201)
async def restore_logged_entry(
    entry: LoggedEntry,
    store: WorkoutSessionStore = Depends(get_store),
    catalog: ExerciseCatalog = Depends(get_catalog),
    db: AsyncSession = Depends(get_db),
):
    """Put back a previously removed set (undo of a removal); PR flags are recomputed."""
    store.history.get_session(entry.workout_session_id)
    exercise_type = await exercise_type_for(catalog, entry.exercise_id)
    changed = store.history.plan_restore(entry, exercise_type)
    restored = next(e for e in changed if e.id == entry.id)
    await records.insert_logged_entry(db, restored)
    await records.save_pr_flags(db, [e for e in changed if e.id != entry.id])
    await db.commit()
    store.history.apply_changes(changed)
    return {"restored": restored, "updated": changed}
