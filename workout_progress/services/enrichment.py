"""Post-finish XP enrichment (second phase of finishing a workout).

Runs after the summary has been returned. Muscle data for every performed
exercise is fetched concurrently; a failed lookup only costs that exercise its
XP. Nothing here raises to the caller.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Iterable, Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from workout_progress.core.errors import CatalogLookupFailed
from workout_progress.schemas.catalog import MuscleInvolvement
from workout_progress.schemas.entry import LoggedEntry
from workout_progress.schemas.progress import MuscleProgress, XPResult
from workout_progress.schemas.workout import FinishResult
from workout_progress.services import records
from workout_progress.services.catalog import ExerciseCatalog
from workout_progress.services.history import WorkoutHistory
from workout_progress.services.progress_aggregation import apply_xp, initial_progress
from workout_progress.services.template_resolution import is_placeholder_id
from workout_progress.services.xp_distribution import calculate_xp_distribution

logger = logging.getLogger(__name__)


async def fetch_exercise_muscles(catalog: ExerciseCatalog, exercise_id: str) -> list[MuscleInvolvement]:
    """Muscle involvement for one exercise; [] when the catalog has no muscle data."""
    try:
        exercise = await catalog.get_exercise(exercise_id)
    except Exception as exc:
        raise CatalogLookupFailed(exercise_id, str(exc)) from exc
    if exercise is None:
        raise CatalogLookupFailed(exercise_id, "not in catalog")
    return list(exercise.muscles or [])


async def compute_workout_xp(
    logged_entries: Sequence[LoggedEntry],
    catalog: ExerciseCatalog,
) -> list[XPResult]:
    """One XPResult per logged entry whose exercise's muscles could be fetched."""
    exercise_ids = list(
        dict.fromkeys(e.exercise_id for e in logged_entries if not is_placeholder_id(e.exercise_id))
    )
    lookups = await asyncio.gather(
        *(fetch_exercise_muscles(catalog, exercise_id) for exercise_id in exercise_ids),
        return_exceptions=True,
    )

    muscles_by_exercise: dict[str, list[MuscleInvolvement]] = {}
    for exercise_id, outcome in zip(exercise_ids, lookups):
        if isinstance(outcome, BaseException):
            logger.warning("Skipping XP for %s: %s", exercise_id, outcome)
            continue
        muscles_by_exercise[exercise_id] = outcome

    results = []
    for entry in logged_entries:
        involvements = muscles_by_exercise.get(entry.exercise_id)
        if involvements is None:
            continue
        results.append(calculate_xp_distribution(involvements, rpe=entry.rpe, is_pr=entry.is_pr))
    return results


def total_xp(results: Iterable[XPResult]) -> int:
    return sum(r.total_xp for r in results)


async def apply_workout_xp(
    db: AsyncSession,
    catalog: ExerciseCatalog,
    results: Sequence[XPResult],
    trained_on,
    default_goal: int = 500,
) -> dict[str, MuscleProgress]:
    """Fold XP results into stored muscle progress and save it. Stored rows stay locked until commit."""
    stored = await records.load_muscle_progress(db, for_update=True)
    progress = initial_progress(await catalog.list_muscles(), stored, default_goal)
    updated = apply_xp(progress, results, trained_on=trained_on)
    await records.save_muscle_progress(db, updated)
    return updated


async def enrich_finished_workout(
    result: FinishResult,
    catalog: ExerciseCatalog,
    session_maker: async_sessionmaker[AsyncSession],
    history: WorkoutHistory | None = None,
    default_goal: int = 500,
    lock: asyncio.Lock | None = None,
) -> int:
    """
    Compute and persist XP for a finished workout. Returns the workout's total
    XP (0 on failure). Jobs sharing `lock` apply their progress one at a time,
    so overlapping enrichments add up instead of overwriting each other.
    """
    summary = result.summary
    try:
        results = await compute_workout_xp(result.logged_entries, catalog)
        workout_xp = total_xp(results)
        async with lock or contextlib.nullcontext():
            async with session_maker() as db:
                await apply_workout_xp(db, catalog, results, summary.date, default_goal)
                await records.set_workout_xp(db, summary.id, workout_xp)
                await db.commit()
    except Exception:
        logger.exception("XP enrichment failed for workout %s", summary.id)
        return 0

    if history is not None:
        history.set_session_xp(summary.id, workout_xp)
    logger.info("Workout %s earned %d XP across %d sets", summary.id, workout_xp, len(results))
    return workout_xp
