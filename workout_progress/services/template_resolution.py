"""Public routines and placeholder resolution.

Public routines reference `template:<slug>` exercise ids. The first time they
are requested, each placeholder is resolved once through a catalog name search
(first term with a hit wins). When nothing matches, or the catalog errors, a
static `fallback:<slug>` exercise is used so the routine stays usable before
the catalog is seeded. The mapping is cached on the resolver.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from workout_progress.core.enums import ExerciseType, RoutineSource
from workout_progress.schemas.catalog import ExerciseDetails
from workout_progress.schemas.routine import Routine, RoutineExercise, RoutineSet
from workout_progress.services.catalog import ExerciseCatalog

logger = logging.getLogger(__name__)

TEMPLATE_PREFIX = "template:"
FALLBACK_PREFIX = "fallback:"

_SEEDED_AT = datetime(2024, 1, 1, tzinfo=timezone.utc)

# Catalog search terms per placeholder slug, most specific first
TEMPLATE_SEARCH_TERMS: dict[str, list[str]] = {
    "pushups": ["push", "pushup"],
    "squats": ["squat"],
    "plank": ["plank"],
    "jumping-jacks": ["jumping", "jack"],
    "arm-circles": ["arm circle", "shoulder circle"],
    "high-knees": ["high knee", "knee"],
    "bench-press": ["bench press", "bench"],
    "overhead-press": ["overhead press", "military press", "shoulder press"],
    "tricep-dips": ["tricep dip", "dip"],
    "treadmill-run": ["treadmill", "running", "run"],
}

FALLBACK_EXERCISES: dict[str, ExerciseDetails] = {
    "pushups": ExerciseDetails(name="Push-ups", exercise_type=ExerciseType.REPS_ONLY),
    "squats": ExerciseDetails(name="Bodyweight Squats", exercise_type=ExerciseType.REPS_ONLY),
    "plank": ExerciseDetails(name="Plank", exercise_type=ExerciseType.DURATION),
    "jumping-jacks": ExerciseDetails(name="Jumping Jacks", exercise_type=ExerciseType.DURATION),
    "arm-circles": ExerciseDetails(name="Arm Circles", exercise_type=ExerciseType.DURATION),
    "high-knees": ExerciseDetails(name="High Knees", exercise_type=ExerciseType.DURATION),
    "bench-press": ExerciseDetails(name="Bench Press (Barbell)", exercise_type=ExerciseType.WEIGHT_REPS),
    "overhead-press": ExerciseDetails(name="Overhead Press (Barbell)", exercise_type=ExerciseType.WEIGHT_REPS),
    "tricep-dips": ExerciseDetails(name="Tricep Dips", exercise_type=ExerciseType.REPS_ONLY),
    "treadmill-run": ExerciseDetails(name="Treadmill Run", exercise_type=ExerciseType.DISTANCE_DURATION),
}


def is_placeholder_id(exercise_id: str) -> bool:
    """Template and fallback ids never exist in the catalog."""
    return exercise_id.startswith((TEMPLATE_PREFIX, FALLBACK_PREFIX))


def _template_exercise(
    slug: str,
    order: int,
    sets: list[dict],
    equipment: list[str] | None = None,
) -> RoutineExercise:
    fallback = FALLBACK_EXERCISES[slug]
    return RoutineExercise(
        id=f"ex{order + 1}",
        exercise_id=f"{TEMPLATE_PREFIX}{slug}",
        exercise_details=fallback.model_copy(update={"equipment": list(equipment or [])}),
        sets=[RoutineSet(id=f"set{i + 1}", **values) for i, values in enumerate(sets)],
        order=order,
    )


def _public_routine(routine_id: str, title: str, description: str, exercises: list[RoutineExercise]) -> Routine:
    return Routine(
        id=routine_id,
        title=title,
        description=description,
        exercises=exercises,
        created_at=_SEEDED_AT,
        updated_at=_SEEDED_AT,
        version=1,
        source=RoutineSource.PUBLIC,
    )


PUBLIC_ROUTINES: list[Routine] = [
    _public_routine(
        "public:full-body-home",
        "Full Body Home Workout",
        "Complete bodyweight routine for home training",
        [
            _template_exercise("pushups", 0, [{"reps": 10}] * 3),
            _template_exercise("squats", 1, [{"reps": 15}] * 3),
            _template_exercise("plank", 2, [{"duration": 30}, {"duration": 45}, {"duration": 60}]),
        ],
    ),
    _public_routine(
        "public:warmup-5min",
        "Warmup (5 min)",
        "Quick dynamic warmup routine",
        [
            _template_exercise("jumping-jacks", 0, [{"duration": 60}]),
            _template_exercise("arm-circles", 1, [{"duration": 30}]),
            _template_exercise("high-knees", 2, [{"duration": 60}]),
        ],
    ),
    _public_routine(
        "public:push-day",
        "Push Day (Barbell Focus)",
        "Upper body push workout with barbell emphasis",
        [
            _template_exercise("bench-press", 0, [{"reps": 8, "weight": 60}] * 3, ["Barbell", "Bench"]),
            _template_exercise("overhead-press", 1, [{"reps": 10, "weight": 40}] * 3, ["Barbell"]),
            _template_exercise("tricep-dips", 2, [{"reps": 12}] * 3, ["Parallel Bars"]),
        ],
    ),
    _public_routine(
        "public:cardio-20min",
        "20-min Zone 2 Cardio",
        "Moderate intensity cardio session",
        [
            _template_exercise("treadmill-run", 0, [{"duration": 1200, "distance": 3000}], ["Treadmill"]),
        ],
    ),
]


def resolve_routine(routine: Routine, mapping: dict[str, tuple[str, ExerciseDetails]]) -> Routine:
    """Swap placeholder ids for resolved ones. Name and type come from the
    resolved exercise; equipment and instructions stay the template's."""
    exercises = []
    for exercise in routine.exercises:
        resolved = mapping.get(exercise.exercise_id)
        if resolved is None:
            exercises.append(exercise)
            continue
        exercise_id, details = resolved
        template_details = exercise.exercise_details
        exercises.append(
            exercise.model_copy(
                update={
                    "exercise_id": exercise_id,
                    "exercise_details": ExerciseDetails(
                        name=details.name,
                        exercise_type=details.exercise_type,
                        equipment=list(template_details.equipment) if template_details else [],
                        instructions=template_details.instructions if template_details else None,
                    ),
                }
            )
        )
    return routine.model_copy(update={"exercises": exercises})


class TemplateResolver:
    """Resolves public routine placeholders once and caches the result."""

    def __init__(self, catalog: ExerciseCatalog):
        self._catalog = catalog
        self._mapping: dict[str, tuple[str, ExerciseDetails]] | None = None

    @property
    def is_resolved(self) -> bool:
        return self._mapping is not None

    async def _find(self, slug: str) -> tuple[str, ExerciseDetails]:
        for term in TEMPLATE_SEARCH_TERMS[slug]:
            try:
                matches = await self._catalog.search_exercises(term, limit=1)
            except Exception:
                logger.warning("Catalog search for %r failed", term, exc_info=True)
                break
            if matches:
                return matches[0].id, matches[0].details()
        logger.warning("No catalog exercise for template %s, using fallback", slug)
        return f"{FALLBACK_PREFIX}{slug}", FALLBACK_EXERCISES[slug]

    async def resolve(self) -> dict[str, tuple[str, ExerciseDetails]]:
        """Placeholder id -> (concrete id, details). Computed on first call only."""
        if self._mapping is None:
            mapping = {}
            for slug in TEMPLATE_SEARCH_TERMS:
                mapping[f"{TEMPLATE_PREFIX}{slug}"] = await self._find(slug)
            self._mapping = mapping
        return self._mapping

    async def public_routines(self) -> list[Routine]:
        mapping = await self.resolve()
        return [resolve_routine(r, mapping) for r in PUBLIC_ROUTINES]
