"""Finished workout sessions, their logged sets and exercise notes."""

from __future__ import annotations

import datetime as dt

from sqlalchemy import JSON, Boolean, Date, DateTime, Enum, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workout_progress.core.enums import StartMethod
from workout_progress.db.base import Base


class Workout(Base):
    """Summary of one finished session."""

    __tablename__ = "workout_sessions"
    __table_args__ = (Index("ix_workout_sessions_start_time", "start_time"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    start_time: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    exercise_ids: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    total_sets: Mapped[int] = mapped_column(Integer, default=0)
    total_volume: Mapped[float] = mapped_column(Float, default=0.0)
    total_xp: Mapped[int] = mapped_column(Integer, default=0)  # filled in after XP enrichment
    start_method: Mapped[StartMethod] = mapped_column(Enum(StartMethod), default=StartMethod.MANUAL)
    source_routine_ids: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    sets: Mapped[list["LoggedSet"]] = relationship(
        "LoggedSet", back_populates="workout", cascade="all, delete-orphan"
    )
    exercise_logs: Mapped[list["ExerciseLog"]] = relationship(
        "ExerciseLog", back_populates="workout", cascade="all, delete-orphan"
    )


class LoggedSet(Base):
    """One completed set. exercise_id is not a FK: fallback exercises live outside the catalog."""

    __tablename__ = "logged_entries"
    __table_args__ = (
        Index("ix_logged_entries_exercise_timestamp", "exercise_id", "timestamp"),
        Index("ix_logged_entries_workout_session_id", "workout_session_id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    exercise_id: Mapped[str] = mapped_column(String(64), nullable=False)
    workout_session_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("workout_sessions.id", ondelete="CASCADE"), nullable=False
    )
    reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)  # kg
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)  # seconds
    distance: Mapped[float | None] = mapped_column(Float, nullable=True)  # meters
    rpe: Mapped[int] = mapped_column(Integer, nullable=False)
    timestamp: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    is_pr: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    pr_value: Mapped[float | None] = mapped_column(Float, nullable=True)

    workout: Mapped["Workout"] = relationship("Workout", back_populates="sets")


class ExerciseLog(Base):
    """Notes written for an exercise during a finished session."""

    __tablename__ = "exercise_notes"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    exercise_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    workout_session_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("workout_sessions.id", ondelete="CASCADE"), nullable=False
    )
    workout_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    notes: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    workout: Mapped["Workout"] = relationship("Workout", back_populates="exercise_logs")
