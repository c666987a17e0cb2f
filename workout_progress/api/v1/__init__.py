"""API v1 router aggregation."""

from fastapi import APIRouter

from workout_progress.api.v1.endpoints import (
    health,
    history,
    pr,
    progress,
    routines,
    streak,
    workout,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(workout.router, prefix="/workout", tags=["workout"])
api_router.include_router(routines.router, prefix="/routines", tags=["routines"])
api_router.include_router(history.router, prefix="/history", tags=["history"])
api_router.include_router(pr.router, prefix="/pr", tags=["pr"])
api_router.include_router(progress.router, prefix="/progress", tags=["progress"])
api_router.include_router(streak.router, prefix="/streak", tags=["streak"])
