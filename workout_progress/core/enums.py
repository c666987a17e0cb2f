"""Shared enums for models and API."""

from enum import Enum


class ExerciseType(str, Enum):
    """Which numeric fields an exercise records."""

    WEIGHT_REPS = "Weight Reps"
    REPS_ONLY = "Reps Only"
    WEIGHTED_BODYWEIGHT = "Weighted Bodyweight"
    ASSISTED_BODYWEIGHT = "Assisted Bodyweight"
    DURATION = "Duration"
    WEIGHT_DURATION = "Weight & Duration"
    DISTANCE_DURATION = "Distance & Duration"
    WEIGHT_DISTANCE = "Weight & Distance"


class MuscleRole(str, Enum):
    """How a muscle participates in an exercise."""

    TARGET = "target"
    SYNERGIST = "synergist"
    STABILIZER = "stabilizer"
    LENGTHENING = "lengthening"


class MajorMuscleGroup(str, Enum):
    CHEST = "chest"
    BACK = "back"
    LEGS = "legs"
    SHOULDERS = "shoulders"
    ARMS = "arms"
    CORE = "core"


class StartMethod(str, Enum):
    """How a workout session was started."""

    MANUAL = "manual"
    QUICK_START = "quick_start"
    ROUTINES = "routines"


class RoutineSource(str, Enum):
    MY = "my"
    PUBLIC = "public"
