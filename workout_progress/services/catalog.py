"""Exercise catalog lookups (read-only external data source).

The engine only needs three questions answered: details + muscles for one
exercise, a name search (for resolving public routine placeholders) and the
muscle list. Each database call opens its own session so lookups for several
exercises can run concurrently.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from workout_progress.core.enums import MuscleRole
from workout_progress.core.errors import NotFound
from workout_progress.models.exercise import Exercise, ExerciseMuscle, Muscle
from workout_progress.schemas.catalog import CatalogExercise, CatalogMuscle, ExerciseDetails, MuscleInvolvement


class ExerciseCatalog(Protocol):
    async def get_exercise(self, exercise_id: str) -> CatalogExercise | None: ...

    async def search_exercises(self, term: str, limit: int = 5) -> list[CatalogExercise]: ...

    async def list_muscles(self) -> list[CatalogMuscle]: ...


async def muscle_roles(
    catalog: ExerciseCatalog,
    exercise_ids: Iterable[str],
) -> dict[str, dict[str, MuscleRole]]:
    """For each exercise: which role each of its muscles plays. Unknown exercises map to {}."""
    roles: dict[str, dict[str, MuscleRole]] = {}
    for exercise_id in exercise_ids:
        exercise = await catalog.get_exercise(exercise_id)
        roles[exercise_id] = {m.muscle_id: m.role for m in (exercise.muscles or [])} if exercise else {}
    return roles


async def details_by_id(catalog: ExerciseCatalog, exercise_ids: Iterable[str]) -> dict[str, ExerciseDetails]:
    """Catalog details for each id; raises NotFound for ids the catalog does not know."""
    details: dict[str, ExerciseDetails] = {}
    for exercise_id in dict.fromkeys(exercise_ids):
        exercise = await catalog.get_exercise(exercise_id)
        if exercise is None:
            raise NotFound(f"Exercise {exercise_id} not found")
        details[exercise_id] = exercise.details()
    return details


class InMemoryExerciseCatalog:
    """Catalog backed by plain lists; used for seeding, local runs and tests."""

    def __init__(
        self,
        exercises: Sequence[CatalogExercise] = (),
        muscles: Sequence[CatalogMuscle] = (),
    ):
        self._exercises = {e.id: e for e in exercises}
        used = {m.muscle_id for e in exercises for m in (e.muscles or [])}
        self._muscles = [m.model_copy(update={"has_exercises": m.id in used}) for m in muscles]

    async def get_exercise(self, exercise_id: str) -> CatalogExercise | None:
        return self._exercises.get(exercise_id)

    async def search_exercises(self, term: str, limit: int = 5) -> list[CatalogExercise]:
        term = term.lower()
        matches = [e for e in self._exercises.values() if term in e.name.lower()]
        return sorted(matches, key=lambda e: e.name)[:limit]

    async def list_muscles(self) -> list[CatalogMuscle]:
        return list(self._muscles)


def _to_catalog_exercise(exercise: Exercise) -> CatalogExercise:
    muscles = [
        MuscleInvolvement(muscle_id=link.muscle_id, role=link.role)
        for link in exercise.muscles
    ]
    return CatalogExercise(
        id=exercise.id,
        name=exercise.name,
        exercise_type=exercise.exercise_type,
        equipment=list(exercise.equipment or []),
        instructions=exercise.instructions,
        muscles=muscles or None,
    )


class DatabaseExerciseCatalog:
    """Catalog reading the exercises / muscles / exercise_muscles tables."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    async def get_exercise(self, exercise_id: str) -> CatalogExercise | None:
        async with self._session_maker() as db:
            result = await db.execute(
                select(Exercise)
                .where(Exercise.id == exercise_id)
                .options(selectinload(Exercise.muscles))
            )
            exercise = result.scalar_one_or_none()
            return _to_catalog_exercise(exercise) if exercise else None

    async def search_exercises(self, term: str, limit: int = 5) -> list[CatalogExercise]:
        async with self._session_maker() as db:
            result = await db.execute(
                select(Exercise)
                .where(Exercise.name.ilike(f"%{term}%"))
                .options(selectinload(Exercise.muscles))
                .order_by(Exercise.name)
                .limit(limit)
            )
            return [_to_catalog_exercise(e) for e in result.scalars().all()]

    async def list_muscles(self) -> list[CatalogMuscle]:
        has_exercises = exists().where(ExerciseMuscle.muscle_id == Muscle.id)
        async with self._session_maker() as db:
            result = await db.execute(
                select(Muscle, has_exercises.label("has_exercises")).order_by(Muscle.id)
            )
            return [
                CatalogMuscle(
                    id=m.id,
                    name=m.name,
                    major_group=m.major_group,
                    goal=m.goal,
                    has_exercises=bool(flag),
                )
                for m, flag in result.all()
            ]
