"""Per-muscle XP progress (long-lived, updated after each finished workout)."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from workout_progress.db.base import Base


class MuscleProgressState(Base):
    """Accumulated XP for one muscle. Major-group progress is derived, never stored."""

    __tablename__ = "muscle_progress"

    muscle_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("muscles.id", ondelete="CASCADE"), primary_key=True
    )
    xp: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    goal: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    percentage: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # unbounded
    streak: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # consecutive ISO weeks
    sets: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_trained_week: Mapped[str | None] = mapped_column(String(10), nullable=True)  # e.g. 2025-W07
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
