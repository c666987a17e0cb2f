"""Shared FastAPI dependencies for the engine objects held on app.state."""

import asyncio

from fastapi import Request

from workout_progress.services.catalog import ExerciseCatalog
from workout_progress.services.session_store import WorkoutSessionStore
from workout_progress.services.template_resolution import TemplateResolver


def get_store(request: Request) -> WorkoutSessionStore:
    """The process-wide session store (one active workout at a time)."""
    return request.app.state.store


def get_catalog(request: Request) -> ExerciseCatalog:
    return request.app.state.catalog


def get_resolver(request: Request) -> TemplateResolver:
    return request.app.state.resolver


def get_progress_lock(request: Request) -> asyncio.Lock:
    """Serializes muscle progress updates from background XP jobs."""
    return request.app.state.progress_lock
