"""Routine (reusable workout template) schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from workout_progress.core.enums import RoutineSource
from workout_progress.schemas.catalog import ExerciseDetails
from workout_progress.schemas.entry import utcnow


class RoutineSet(BaseModel):
    """Default values for one set; no completion state or RPE."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    reps: int | None = Field(None, ge=0)
    weight: float | None = None
    duration: int | None = Field(None, ge=0)
    distance: float | None = Field(None, ge=0)
    rest_seconds: int | None = Field(None, ge=0)
    notes: str | None = None


class RoutineExercise(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    exercise_id: str
    exercise_details: ExerciseDetails | None = None
    sets: list[RoutineSet] = Field(default_factory=list)
    notes: str | None = None
    order: int = 0


class Routine(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str | None = None
    exercises: list[RoutineExercise] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    version: int = 1
    source: RoutineSource = RoutineSource.MY


class RoutineSetInput(BaseModel):
    reps: int | None = Field(None, ge=0)
    weight: float | None = None
    duration: int | None = Field(None, ge=0)
    distance: float | None = Field(None, ge=0)
    rest_seconds: int | None = Field(None, ge=0)
    notes: str | None = None


class RoutineExerciseInput(BaseModel):
    exercise_id: str
    exercise_details: ExerciseDetails | None = None
    sets: list[RoutineSetInput] = Field(default_factory=list)
    notes: str | None = None


class RoutineCreate(BaseModel):
    # Emptiness is checked by the service so a blank title maps to ValidationFailed
    title: str = Field(..., max_length=255)
    description: str | None = None
    exercises: list[RoutineExerciseInput] = Field(default_factory=list)


class RoutineUpdate(BaseModel):
    title: str | None = Field(None, max_length=255)
    description: str | None = None
    exercises: list[RoutineExerciseInput] | None = None


class RoutineStackRequest(BaseModel):
    routine_ids: list[str] = Field(..., min_length=1)
    clear_values: bool = False
    workout_name: str | None = Field(None, max_length=255)
