"""Workout session, workout exercise and finish-result schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from workout_progress.core.enums import StartMethod
from workout_progress.schemas.catalog import ExerciseDetails
from workout_progress.schemas.entry import EntrySeed, LoggedEntry, WorkingEntry, utcnow


class WorkoutExercise(BaseModel):
    """One exercise instance in a session. `id` is the instance id, distinct from `exercise_id`."""

    id: str
    exercise_id: str
    exercise_details: ExerciseDetails | None = None
    entries: list[WorkingEntry] = Field(default_factory=list)
    notes: str | None = None
    order: int = 0
    from_routine_id: str | None = None


class WorkoutSession(BaseModel):
    id: str
    name: str | None = None
    exercises: list[WorkoutExercise] = Field(default_factory=list)
    start_time: datetime = Field(default_factory=utcnow)
    is_active: bool = False
    start_method: StartMethod = StartMethod.MANUAL
    source_routine_ids: list[str] = Field(default_factory=list)


class WorkoutSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None = None
    start_time: datetime
    end_time: datetime
    date: date
    exercise_ids: list[str] = Field(default_factory=list)
    total_sets: int = 0
    total_volume: float = 0.0
    total_xp: int = 0
    start_method: StartMethod = StartMethod.MANUAL
    source_routine_ids: list[str] = Field(default_factory=list)


class ExerciseNote(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    exercise_id: str
    workout_session_id: str
    workout_date: date
    notes: str
    timestamp: datetime


class FinishResult(BaseModel):
    summary: WorkoutSummary
    logged_entries: list[LoggedEntry] = Field(default_factory=list)
    exercise_notes: list[ExerciseNote] = Field(default_factory=list)


class WorkoutStats(BaseModel):
    """Live numbers for the active session."""

    duration_seconds: int
    total_volume: float
    completed_sets: int


# Request bodies


class WorkoutStart(BaseModel):
    name: str | None = Field(None, max_length=255)
    start_method: StartMethod = StartMethod.MANUAL


class WorkoutFinish(BaseModel):
    name: str | None = Field(None, max_length=255)


class ExercisesAdd(BaseModel):
    exercise_ids: list[str] = Field(..., min_length=1)


class ExerciseReplace(BaseModel):
    exercise_id: str


class ExerciseNotesUpdate(BaseModel):
    notes: str | None = Field(None, max_length=2000)


class EntryCreate(EntrySeed):
    copy_forward: bool = True
