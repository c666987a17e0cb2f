"""XP awards and muscle / major-group progress schemas."""

from pydantic import BaseModel, ConfigDict, Field

from workout_progress.core.enums import MajorMuscleGroup, MuscleRole


class MuscleXPAward(BaseModel):
    muscle_id: str
    role: MuscleRole
    xp_awarded: int
    multiplier: float


class XPResult(BaseModel):
    """XP for one completed entry. `total_xp` is the sum of the per-muscle awards."""

    total_xp: int = 0
    muscle_xp_distribution: list[MuscleXPAward] = Field(default_factory=list)


class MuscleProgress(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    xp: int = 0
    goal: int = 0
    # Stored unbounded; clamp with display_percentage when rendering
    percentage: int = 0
    streak: int = 0
    sets: int = 0
    has_exercises: bool = False
    last_trained_week: str | None = None


class MuscleProgressRead(MuscleProgress):
    muscle_id: str
    major_group: MajorMuscleGroup | None = None
    display_percentage: int = 0


class MajorGroupProgress(BaseModel):
    major_group: MajorMuscleGroup
    level: int = 1
    xp: int = 0
    next_level: int = 100
    percentage: int = 0
    display_percentage: int = 0
    streak: int = 0
    sets: int = 0
    muscles: list[str] = Field(default_factory=list)
