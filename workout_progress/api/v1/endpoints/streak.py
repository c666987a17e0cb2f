"""Streak calculation endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from workout_progress.api.deps import get_store
from workout_progress.services.session_store import WorkoutSessionStore
from workout_progress.services.streak import workout_streak

router = APIRouter()


@router.get("")
async def get_streak(store: WorkoutSessionStore = Depends(get_store)):
    """
    Returns current workout streak (consecutive days with at least 1 workout),
    longest ever streak, and the date of the last workout.
    """
    today = datetime.now(timezone.utc).date()
    return workout_streak(store.history.workout_dates(), today)
