import asyncio
import os
import tempfile
from datetime import date, datetime, timedelta, timezone

# Settings are read once at import; point them at a throwaway SQLite file first
_db_dir = tempfile.mkdtemp(prefix="workout_progress_tests_")
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite+aiosqlite:///" + os.path.join(_db_dir, "test.db")
os.environ["CREATE_TABLES_ON_STARTUP"] = "true"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from workout_progress.core.enums import ExerciseType, MajorMuscleGroup, MuscleRole  # noqa: E402
from workout_progress.db.base import Base  # noqa: E402
from workout_progress.db.session import engine  # noqa: E402
from workout_progress.schemas.catalog import CatalogExercise, CatalogMuscle, MuscleInvolvement  # noqa: E402
from workout_progress.schemas.entry import LoggedEntry  # noqa: E402
from workout_progress.services.catalog import InMemoryExerciseCatalog  # noqa: E402
from workout_progress.services.template_resolution import TemplateResolver  # noqa: E402

T0 = datetime(2025, 3, 3, 9, 0, tzinfo=timezone.utc)


def _muscles(**roles: MuscleRole) -> list[MuscleInvolvement]:
    return [MuscleInvolvement(muscle_id=m, role=r) for m, r in roles.items()]


CATALOG_EXERCISES = [
    CatalogExercise(
        id="bench",
        name="Bench Press (Barbell)",
        exercise_type=ExerciseType.WEIGHT_REPS,
        equipment=["Barbell", "Bench"],
        muscles=_muscles(
            pectoralis_major=MuscleRole.TARGET,
            triceps_brachii=MuscleRole.SYNERGIST,
            deltoids=MuscleRole.SYNERGIST,
        ),
    ),
    CatalogExercise(
        id="squat",
        name="Barbell Squat",
        exercise_type=ExerciseType.WEIGHT_REPS,
        equipment=["Barbell"],
        muscles=_muscles(rectus_femoris=MuscleRole.TARGET, gluteus_maximus=MuscleRole.TARGET),
    ),
    CatalogExercise(id="plank", name="Plank", exercise_type=ExerciseType.DURATION, muscles=None),
    CatalogExercise(
        id="run",
        name="Treadmill Run",
        exercise_type=ExerciseType.DISTANCE_DURATION,
        equipment=["Treadmill"],
        muscles=_muscles(rectus_femoris=MuscleRole.TARGET),
    ),
]

CATALOG_MUSCLES = [
    CatalogMuscle(id="pectoralis_major", name="Pectoralis Major", major_group=MajorMuscleGroup.CHEST),
    CatalogMuscle(id="triceps_brachii", name="Triceps", major_group=MajorMuscleGroup.ARMS),
    CatalogMuscle(id="deltoids", name="Deltoids", major_group=MajorMuscleGroup.SHOULDERS),
    CatalogMuscle(id="rectus_femoris", name="Rectus Femoris", major_group=MajorMuscleGroup.LEGS),
    CatalogMuscle(id="gluteus_maximus", name="Gluteus Maximus", major_group=MajorMuscleGroup.LEGS, goal=200),
    CatalogMuscle(id="sternocleidomastoid", name="Sternocleidomastoid", major_group=MajorMuscleGroup.CORE),
]


@pytest.fixture
def catalog() -> InMemoryExerciseCatalog:
    return InMemoryExerciseCatalog(CATALOG_EXERCISES, CATALOG_MUSCLES)


@pytest.fixture
def make_logged():
    """Factory for logged sets; minutes are offsets from a fixed start time."""
    counter = iter(range(1, 10_000))

    def _make(
        exercise_id: str = "bench",
        weight: float | None = None,
        reps: int | None = None,
        minutes: int = 0,
        session_id: str = "workout_a",
        rpe: int = 8,
        is_pr: bool = False,
        **values,
    ) -> LoggedEntry:
        ts = T0 + timedelta(minutes=minutes)
        return LoggedEntry(
            id=f"set_{next(counter)}",
            exercise_id=exercise_id,
            workout_session_id=session_id,
            weight=weight,
            reps=reps,
            rpe=rpe,
            timestamp=ts,
            date=ts.date(),
            is_pr=is_pr,
            **values,
        )

    return _make


async def _reset_database() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    # Pooled connections are tied to this loop; drop them before the next one
    await engine.dispose()


@pytest.fixture
def clean_db():
    asyncio.run(_reset_database())
    yield


@pytest.fixture
async def fresh_db():
    """Same reset for async tests, which already run inside an event loop."""
    await _reset_database()
    yield
    await engine.dispose()


@pytest.fixture
def client(clean_db, catalog):
    from workout_progress.main import create_application

    app = create_application()
    with TestClient(app) as test_client:
        app.state.catalog = catalog
        app.state.resolver = TemplateResolver(catalog)
        yield test_client


@pytest.fixture
def today() -> date:
    return datetime.now(timezone.utc).date()
