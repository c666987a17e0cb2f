"""PR Trophy Room - records broken this month or year."""

from datetime import datetime, timezone
from typing import Literal

from fastapi import APIRouter, Depends

from workout_progress.api.deps import get_catalog, get_store
from workout_progress.services.catalog import ExerciseCatalog
from workout_progress.services.session_store import WorkoutSessionStore

router = APIRouter()


@router.get("/trophy-room")
async def pr_trophy_room(
    period: Literal["month", "year"] = "month",
    store: WorkoutSessionStore = Depends(get_store),
    catalog: ExerciseCatalog = Depends(get_catalog),
):
    """
    Lists sets marked as PR (personal record) in the given period.
    period=month: this calendar month; period=year: this calendar year.
    """
    now = datetime.now(timezone.utc)
    if period == "month":
        start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    else:
        start = now.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)

    entries = store.history.pr_entries(since=start)
    names: dict[str, str | None] = {}
    for exercise_id in {e.exercise_id for e in entries}:
        exercise = await catalog.get_exercise(exercise_id)
        names[exercise_id] = exercise.name if exercise else None

    return {
        "period": period,
        "from": start.isoformat(),
        "to": now.isoformat(),
        "count": len(entries),
        "records": [
            {
                "entry_id": e.id,
                "workout_session_id": e.workout_session_id,
                "timestamp": e.timestamp.isoformat(),
                "exercise_id": e.exercise_id,
                "exercise_name": names.get(e.exercise_id),
                "pr_value": e.pr_value,
                "weight": e.weight,
                "reps": e.reps,
                "duration": e.duration,
                "distance": e.distance,
            }
            for e in entries
        ],
    }
