"""ORM models - import all so Base.metadata is complete for migrations."""

from workout_progress.models.exercise import Exercise, ExerciseMuscle, Muscle
from workout_progress.models.progress import MuscleProgressState
from workout_progress.models.routine import Routine, RoutineExercise, RoutineSet
from workout_progress.models.workout import ExerciseLog, LoggedSet, Workout

__all__ = [
    "Exercise",
    "ExerciseLog",
    "ExerciseMuscle",
    "LoggedSet",
    "Muscle",
    "MuscleProgressState",
    "Routine",
    "RoutineExercise",
    "RoutineSet",
    "Workout",
]
