"""Application constants."""

from workout_progress.core.enums import ExerciseType, MajorMuscleGroup, MuscleRole

# RPE (rate of perceived exertion): 1 = very easy, 10 = maximum effort
RPE_MIN = 1
RPE_MAX = 10

# Numeric fields of a performance entry, in display order
MEASUREMENT_FIELDS = ("weight", "reps", "duration", "distance")

# Which fields each exercise type records
REQUIRED_FIELDS: dict[ExerciseType, frozenset[str]] = {
    ExerciseType.WEIGHT_REPS: frozenset({"weight", "reps"}),
    ExerciseType.REPS_ONLY: frozenset({"reps"}),
    ExerciseType.WEIGHTED_BODYWEIGHT: frozenset({"weight", "reps"}),
    ExerciseType.ASSISTED_BODYWEIGHT: frozenset({"weight", "reps"}),
    ExerciseType.DURATION: frozenset({"duration"}),
    ExerciseType.WEIGHT_DURATION: frozenset({"weight", "duration"}),
    ExerciseType.DISTANCE_DURATION: frozenset({"distance", "duration"}),
    ExerciseType.WEIGHT_DISTANCE: frozenset({"weight", "distance"}),
}

# Used when a workout exercise carries no details
DEFAULT_EXERCISE_TYPE = ExerciseType.WEIGHT_REPS

# XP per completed entry before role/RPE/PR weighting
BASE_XP_PER_SET = 10

ROLE_MULTIPLIERS: dict[MuscleRole, float] = {
    MuscleRole.TARGET: 1.0,
    MuscleRole.SYNERGIST: 0.5,
    MuscleRole.STABILIZER: 0.3,
    MuscleRole.LENGTHENING: 0.2,
}

# Each target muscle gets this instead of 1.0 when an exercise has several
MULTIPLE_TARGET_FACTOR = 0.7

MIN_RPE_MULTIPLIER = 0.1
MAX_RPE_MULTIPLIER = 1.0

# Applied to every muscle's award when the entry is a personal record
PR_XP_BONUS_MULTIPLIER = 1.5

# Group progress tracks the best-trained muscle against this target
MAJOR_GROUP_TARGET = 100
XP_PER_LEVEL = 100

# Routine stacking
DEFAULT_WORKOUT_NAME = "Custom Workout"
STACKED_NAME_MAX_LENGTH = 60
STACKED_NAME_SEPARATOR = " + "

MUSCLE_TO_GROUP: dict[str, MajorMuscleGroup] = {
    # Chest
    "pectoralis_major": MajorMuscleGroup.CHEST,
    "serratus_anterior": MajorMuscleGroup.CHEST,
    # Back
    "latissimus_dorsi": MajorMuscleGroup.BACK,
    "lower_trapezius": MajorMuscleGroup.BACK,
    "rhomboid_muscles": MajorMuscleGroup.BACK,
    "trapezius": MajorMuscleGroup.BACK,
    "teres_major": MajorMuscleGroup.BACK,
    "erector_spinae": MajorMuscleGroup.BACK,
    "infraspinatus": MajorMuscleGroup.BACK,
    # Legs
    "rectus_femoris": MajorMuscleGroup.LEGS,
    "vastus_lateralis": MajorMuscleGroup.LEGS,
    "vastus_medialis": MajorMuscleGroup.LEGS,
    "biceps_femoris": MajorMuscleGroup.LEGS,
    "semitendinosus": MajorMuscleGroup.LEGS,
    "gastrocnemius": MajorMuscleGroup.LEGS,
    "soleus": MajorMuscleGroup.LEGS,
    "gluteus_maximus": MajorMuscleGroup.LEGS,
    "gluteus_medius": MajorMuscleGroup.LEGS,
    "adductor_longus_and_pectineus": MajorMuscleGroup.LEGS,
    "adductor_magnus": MajorMuscleGroup.LEGS,
    "gracilis": MajorMuscleGroup.LEGS,
    "sartorius": MajorMuscleGroup.LEGS,
    "tensor_fasciae_latae": MajorMuscleGroup.LEGS,
    "peroneus_longus": MajorMuscleGroup.LEGS,
    # Shoulders
    "deltoids": MajorMuscleGroup.SHOULDERS,
    # Arms
    "biceps_brachii": MajorMuscleGroup.ARMS,
    "triceps_brachii": MajorMuscleGroup.ARMS,
    "brachialis": MajorMuscleGroup.ARMS,
    "brachioradialis": MajorMuscleGroup.ARMS,
    "extensor_carpi_radialis": MajorMuscleGroup.ARMS,
    "flexor_carpi_radialis": MajorMuscleGroup.ARMS,
    "flexor_carpi_ulnaris": MajorMuscleGroup.ARMS,
    # Core
    "rectus_abdominis": MajorMuscleGroup.CORE,
    "external_obliques": MajorMuscleGroup.CORE,
    "omohyoid": MajorMuscleGroup.CORE,
    "sternocleidomastoid": MajorMuscleGroup.CORE,
}
