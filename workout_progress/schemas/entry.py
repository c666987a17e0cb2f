"""Performance entry schemas: working (in-session) and logged (historical)."""

from datetime import date, datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from workout_progress.core.constants import RPE_MAX, RPE_MIN


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EntryValues(BaseModel):
    """Numeric fields in canonical units: kg, seconds, meters. Unused fields stay None."""

    reps: int | None = Field(None, ge=0)
    weight: float | None = None
    duration: int | None = Field(None, ge=0)
    distance: float | None = Field(None, ge=0)


class WorkingEntry(EntryValues):
    """One set inside an active workout."""

    id: str
    rpe: int | None = Field(None, ge=RPE_MIN, le=RPE_MAX)
    timestamp: datetime = Field(default_factory=utcnow)
    is_completed: bool = False
    is_pr: bool | None = None
    pr_value: float | None = None


class EntrySeed(EntryValues):
    """Initial values for a new working entry."""

    rpe: int | None = Field(None, ge=RPE_MIN, le=RPE_MAX)


class EntryUpdate(EntryValues):
    """Partial update; only fields explicitly set are applied. Completion goes through /complete."""

    model_config = ConfigDict(extra="forbid")

    rpe: int | None = Field(None, ge=RPE_MIN, le=RPE_MAX)


class EntryComplete(BaseModel):
    rpe: int = Field(..., ge=RPE_MIN, le=RPE_MAX)


class LoggedEntry(EntryValues):
    """Persisted historical set. Always carries an RPE."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    exercise_id: str
    workout_session_id: str
    rpe: int = Field(..., ge=RPE_MIN, le=RPE_MAX)
    timestamp: datetime
    date: date
    is_pr: bool = False
    pr_value: float | None = None
