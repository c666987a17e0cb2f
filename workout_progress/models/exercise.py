"""Exercise catalog models - exercises, muscles and the role each muscle plays."""

from __future__ import annotations

import uuid

from sqlalchemy import JSON, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workout_progress.core.enums import ExerciseType, MajorMuscleGroup, MuscleRole
from workout_progress.db.base import Base


class Exercise(Base):
    """Exercise definition with its type (which fields it records) and muscle involvement."""

    __tablename__ = "exercises"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=lambda: uuid.uuid4().hex)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    exercise_type: Mapped[ExerciseType] = mapped_column(
        Enum(ExerciseType), default=ExerciseType.WEIGHT_REPS, nullable=False
    )
    equipment: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    instructions: Mapped[str | None] = mapped_column(Text, nullable=True)

    muscles: Mapped[list["ExerciseMuscle"]] = relationship(
        "ExerciseMuscle", back_populates="exercise", cascade="all, delete-orphan"
    )


class Muscle(Base):
    """Individual muscle, keyed by its body-map id (e.g. pectoralis_major)."""

    __tablename__ = "muscles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    major_group: Mapped[MajorMuscleGroup | None] = mapped_column(Enum(MajorMuscleGroup), nullable=True)
    goal: Mapped[int | None] = mapped_column(Integer, nullable=True)  # XP goal; settings default when NULL

    exercises: Mapped[list["ExerciseMuscle"]] = relationship("ExerciseMuscle", back_populates="muscle")


class ExerciseMuscle(Base):
    """Link: muscle X plays role R in exercise E."""

    __tablename__ = "exercise_muscles"
    __table_args__ = (UniqueConstraint("exercise_id", "muscle_id", name="uq_exercise_muscle"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    exercise_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False, index=True
    )
    muscle_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("muscles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[MuscleRole] = mapped_column(Enum(MuscleRole), nullable=False)

    exercise: Mapped["Exercise"] = relationship("Exercise", back_populates="muscles")
    muscle: Mapped["Muscle"] = relationship("Muscle", back_populates="exercises")
