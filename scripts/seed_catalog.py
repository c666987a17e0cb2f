"""Seed the exercise catalog (muscles, exercises, muscle roles) for local development.

Usage: python scripts/seed_catalog.py
Idempotent: rows that already exist are left alone.
"""

import asyncio
import logging
import os
import sys

# Add parent directory to path so we can import workout_progress modules
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from workout_progress.core.enums import ExerciseType, MuscleRole  # noqa: E402
from workout_progress.core.constants import MUSCLE_TO_GROUP  # noqa: E402
from workout_progress.db.base import Base  # noqa: E402
from workout_progress.db.session import async_session_maker, engine  # noqa: E402
from workout_progress.models import Exercise, ExerciseMuscle, Muscle  # noqa: E402

logger = logging.getLogger("seed_catalog")

T, S, ST, L = MuscleRole.TARGET, MuscleRole.SYNERGIST, MuscleRole.STABILIZER, MuscleRole.LENGTHENING

# (id, name, type, equipment, {muscle_id: role})
EXERCISES = [
    ("push-up", "Push-up", ExerciseType.REPS_ONLY, [],
     {"pectoralis_major": T, "triceps_brachii": S, "deltoids": S, "rectus_abdominis": ST}),
    ("bodyweight-squat", "Bodyweight Squat", ExerciseType.REPS_ONLY, [],
     {"rectus_femoris": T, "vastus_lateralis": T, "gluteus_maximus": S, "erector_spinae": ST}),
    ("plank", "Plank", ExerciseType.DURATION, [],
     {"rectus_abdominis": T, "external_obliques": S, "erector_spinae": ST}),
    ("jumping-jack", "Jumping Jack", ExerciseType.DURATION, [],
     {"gastrocnemius": T, "deltoids": S, "gluteus_medius": S}),
    ("bench-press-barbell", "Bench Press (Barbell)", ExerciseType.WEIGHT_REPS, ["Barbell", "Bench"],
     {"pectoralis_major": T, "triceps_brachii": S, "deltoids": S, "latissimus_dorsi": ST}),
    ("overhead-press-barbell", "Overhead Press (Barbell)", ExerciseType.WEIGHT_REPS, ["Barbell"],
     {"deltoids": T, "triceps_brachii": S, "trapezius": ST, "rectus_abdominis": ST}),
    ("tricep-dip", "Tricep Dip", ExerciseType.REPS_ONLY, ["Parallel Bars"],
     {"triceps_brachii": T, "pectoralis_major": S, "deltoids": L}),
    ("treadmill-run", "Treadmill Run", ExerciseType.DISTANCE_DURATION, ["Treadmill"],
     {"rectus_femoris": T, "biceps_femoris": S, "gastrocnemius": S, "soleus": S}),
    ("deadlift-barbell", "Deadlift (Barbell)", ExerciseType.WEIGHT_REPS, ["Barbell"],
     {"erector_spinae": T, "gluteus_maximus": T, "biceps_femoris": S, "trapezius": ST, "latissimus_dorsi": ST}),
    ("pull-up", "Pull-up", ExerciseType.REPS_ONLY, ["Pull-up Bar"],
     {"latissimus_dorsi": T, "biceps_brachii": S, "rhomboid_muscles": S, "rectus_abdominis": ST}),
    ("bicep-curl-dumbbell", "Bicep Curl (Dumbbell)", ExerciseType.WEIGHT_REPS, ["Dumbbell"],
     {"biceps_brachii": T, "brachialis": S, "brachioradialis": S, "triceps_brachii": L}),
    ("farmers-carry", "Farmer's Carry", ExerciseType.WEIGHT_DISTANCE, ["Dumbbell"],
     {"trapezius": T, "flexor_carpi_ulnaris": S, "rectus_abdominis": ST}),
]


def muscle_name(muscle_id: str) -> str:
    return muscle_id.replace("_", " ").title()


async def seed() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_maker() as db:
        for muscle_id, group in MUSCLE_TO_GROUP.items():
            if await db.get(Muscle, muscle_id) is None:
                db.add(Muscle(id=muscle_id, name=muscle_name(muscle_id), major_group=group))
        await db.flush()

        added = 0
        for exercise_id, name, exercise_type, equipment, muscles in EXERCISES:
            if await db.get(Exercise, exercise_id) is not None:
                continue
            db.add(Exercise(id=exercise_id, name=name, exercise_type=exercise_type, equipment=equipment))
            for muscle_id, role in muscles.items():
                if muscle_id not in MUSCLE_TO_GROUP:
                    logger.warning("Unknown muscle %s for %s, skipping", muscle_id, exercise_id)
                    continue
                db.add(ExerciseMuscle(exercise_id=exercise_id, muscle_id=muscle_id, role=role))
            added += 1
        await db.commit()
    logger.info("Seeded %d exercises, %d muscles", added, len(MUSCLE_TO_GROUP))
    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())
