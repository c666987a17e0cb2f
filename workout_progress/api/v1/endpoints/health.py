"""Health check endpoint for load balancers and monitoring."""

import os

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from workout_progress.api.deps import get_store
from workout_progress.db.session import get_db
from workout_progress.services.session_store import WorkoutSessionStore

router = APIRouter()


@router.get("")
async def health(store: WorkoutSessionStore = Depends(get_store)):
    """Liveness check, plus whether a workout is in progress."""
    payload: dict = {"status": "ok", "active_workout": store.is_active}
    built_at = os.environ.get("BACKEND_BUILT_AT")
    if built_at:
        payload["built_at"] = built_at
    return payload


@router.get("/ready")
async def readiness(db: AsyncSession = Depends(get_db)):
    """Readiness: app + DB connectivity."""
    try:
        await db.execute(text("SELECT 1"))
        return {"status": "ok", "database": "connected"}
    except Exception as e:
        return JSONResponse(
            status_code=500,
            content={"status": "error", "database": str(e)},
        )
