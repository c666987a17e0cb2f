"""Exercise catalog shapes (read-only external data)."""

from pydantic import BaseModel, ConfigDict, Field

from workout_progress.core.enums import ExerciseType, MajorMuscleGroup, MuscleRole


class MuscleInvolvement(BaseModel):
    muscle_id: str
    role: MuscleRole


class ExerciseDetails(BaseModel):
    """Exercise metadata embedded in workout and routine exercises."""

    name: str
    exercise_type: ExerciseType = ExerciseType.WEIGHT_REPS
    equipment: list[str] = Field(default_factory=list)
    instructions: str | None = None


class CatalogExercise(ExerciseDetails):
    model_config = ConfigDict(from_attributes=True)

    id: str
    # None when the catalog has no muscle data for the exercise
    muscles: list[MuscleInvolvement] | None = None

    def details(self) -> ExerciseDetails:
        return ExerciseDetails(
            name=self.name,
            exercise_type=self.exercise_type,
            equipment=list(self.equipment),
            instructions=self.instructions,
        )


class CatalogMuscle(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    major_group: MajorMuscleGroup | None = None
    goal: int | None = None
    has_exercises: bool = False
