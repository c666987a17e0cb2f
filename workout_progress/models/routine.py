"""Routine - a saved workout template with default set values."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workout_progress.db.base import Base


class Routine(Base):
    """User-owned routine (public routines are built in, not stored)."""

    __tablename__ = "routines"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    version: Mapped[int] = mapped_column(Integer, default=1)

    exercises: Mapped[list["RoutineExercise"]] = relationship(
        "RoutineExercise",
        back_populates="routine",
        cascade="all, delete-orphan",
        order_by="RoutineExercise.order_in_routine",
    )


class RoutineExercise(Base):
    """Exercise in a routine, with optional cached catalog details."""

    __tablename__ = "routine_exercises"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    routine_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("routines.id", ondelete="CASCADE"), nullable=False, index=True
    )
    exercise_id: Mapped[str] = mapped_column(String(64), nullable=False)
    exercise_details: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    order_in_routine: Mapped[int] = mapped_column(Integer, default=0)

    routine: Mapped["Routine"] = relationship("Routine", back_populates="exercises")
    sets: Mapped[list["RoutineSet"]] = relationship(
        "RoutineSet",
        back_populates="routine_exercise",
        cascade="all, delete-orphan",
        order_by="RoutineSet.set_order",
    )


class RoutineSet(Base):
    """Default values for one set of a routine exercise."""

    __tablename__ = "routine_sets"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    routine_exercise_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("routine_exercises.id", ondelete="CASCADE"), nullable=False, index=True
    )
    set_order: Mapped[int] = mapped_column(Integer, default=0)
    reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    distance: Mapped[float | None] = mapped_column(Float, nullable=True)
    rest_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    routine_exercise: Mapped["RoutineExercise"] = relationship("RoutineExercise", back_populates="sets")
