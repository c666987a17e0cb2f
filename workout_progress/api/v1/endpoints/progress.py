"""Muscle and major-group XP progress."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from workout_progress.api.deps import get_catalog
from workout_progress.core.config import get_settings
from workout_progress.core.enums import MajorMuscleGroup
from workout_progress.db.session import get_db
from workout_progress.schemas.progress import MajorGroupProgress, MuscleProgress, MuscleProgressRead
from workout_progress.services import records
from workout_progress.services.catalog import ExerciseCatalog
from workout_progress.services.progress_aggregation import (
    display_percentage,
    initial_progress,
    muscle_groups,
    rollup_major_groups,
    visible_muscles,
)

router = APIRouter()
settings = get_settings()


async def current_progress(
    db: AsyncSession, catalog: ExerciseCatalog
) -> tuple[dict[str, MuscleProgress], dict[str, MajorMuscleGroup]]:
    """Progress per catalog muscle and the major group each muscle belongs to."""
    muscles = await catalog.list_muscles()
    stored = await records.load_muscle_progress(db)
    return initial_progress(muscles, stored, settings.default_muscle_goal), muscle_groups(muscles)


@router.get("/muscles", response_model=list[MuscleProgressRead])
async def muscle_progress(
    include_untrainable: bool = False,
    db: AsyncSession = Depends(get_db),
    catalog: ExerciseCatalog = Depends(get_catalog),
):
    """
    Per-muscle XP, goal and percentage (stored unbounded; display_percentage is
    clamped to 0..100). Muscles with no catalog exercises are hidden unless
    include_untrainable=true.
    """
    progress, groups = await current_progress(db, catalog)
    if not include_untrainable:
        progress = visible_muscles(progress)
    return [
        MuscleProgressRead(
            muscle_id=muscle_id,
            major_group=groups.get(muscle_id),
            display_percentage=display_percentage(p.percentage),
            **p.model_dump(),
        )
        for muscle_id, p in sorted(progress.items())
    ]


@router.get("/groups", response_model=list[MajorGroupProgress])
async def group_progress(
    db: AsyncSession = Depends(get_db),
    catalog: ExerciseCatalog = Depends(get_catalog),
):
    """Major-group progress: best-trained muscle's percentage, summed XP for the level."""
    progress, groups = await current_progress(db, catalog)
    return rollup_major_groups(progress, groups)
