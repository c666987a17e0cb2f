"""Initial schema: catalog, workout history, routines, muscle progress.

Revision ID: 001
Revises:
Create Date: 2025-03-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Enum columns store member names
exercise_type = sa.Enum(
    "WEIGHT_REPS",
    "REPS_ONLY",
    "WEIGHTED_BODYWEIGHT",
    "ASSISTED_BODYWEIGHT",
    "DURATION",
    "WEIGHT_DURATION",
    "DISTANCE_DURATION",
    "WEIGHT_DISTANCE",
    name="exercisetype",
)
major_group = sa.Enum("CHEST", "BACK", "LEGS", "SHOULDERS", "ARMS", "CORE", name="majormusclegroup")
muscle_role = sa.Enum("TARGET", "SYNERGIST", "STABILIZER", "LENGTHENING", name="musclerole")
start_method = sa.Enum("MANUAL", "QUICK_START", "ROUTINES", name="startmethod")


def upgrade() -> None:
    op.create_table(
        "exercises",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("exercise_type", exercise_type, nullable=False),
        sa.Column("equipment", sa.JSON(), nullable=False),
        sa.Column("instructions", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_exercises_name"), "exercises", ["name"], unique=False)

    op.create_table(
        "muscles",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("major_group", major_group, nullable=True),
        sa.Column("goal", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "exercise_muscles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("exercise_id", sa.String(length=64), nullable=False),
        sa.Column("muscle_id", sa.String(length=64), nullable=False),
        sa.Column("role", muscle_role, nullable=False),
        sa.ForeignKeyConstraint(["exercise_id"], ["exercises.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["muscle_id"], ["muscles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("exercise_id", "muscle_id", name="uq_exercise_muscle"),
    )
    op.create_index(op.f("ix_exercise_muscles_exercise_id"), "exercise_muscles", ["exercise_id"], unique=False)
    op.create_index(op.f("ix_exercise_muscles_muscle_id"), "exercise_muscles", ["muscle_id"], unique=False)

    op.create_table(
        "workout_sessions",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("exercise_ids", sa.JSON(), nullable=False),
        sa.Column("total_sets", sa.Integer(), nullable=True),
        sa.Column("total_volume", sa.Float(), nullable=True),
        sa.Column("total_xp", sa.Integer(), nullable=True),
        sa.Column("start_method", start_method, nullable=True),
        sa.Column("source_routine_ids", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_workout_sessions_start_time", "workout_sessions", ["start_time"], unique=False)

    op.create_table(
        "logged_entries",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("exercise_id", sa.String(length=64), nullable=False),
        sa.Column("workout_session_id", sa.String(length=64), nullable=False),
        sa.Column("reps", sa.Integer(), nullable=True),
        sa.Column("weight", sa.Float(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("distance", sa.Float(), nullable=True),
        sa.Column("rpe", sa.Integer(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("is_pr", sa.Boolean(), nullable=False),
        sa.Column("pr_value", sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(["workout_session_id"], ["workout_sessions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_logged_entries_exercise_timestamp", "logged_entries", ["exercise_id", "timestamp"], unique=False
    )
    op.create_index(
        "ix_logged_entries_workout_session_id", "logged_entries", ["workout_session_id"], unique=False
    )

    op.create_table(
        "exercise_notes",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("exercise_id", sa.String(length=64), nullable=False),
        sa.Column("workout_session_id", sa.String(length=64), nullable=False),
        sa.Column("workout_date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["workout_session_id"], ["workout_sessions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_exercise_notes_exercise_id"), "exercise_notes", ["exercise_id"], unique=False)

    op.create_table(
        "routines",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_routines_title"), "routines", ["title"], unique=False)

    op.create_table(
        "routine_exercises",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("routine_id", sa.String(length=64), nullable=False),
        sa.Column("exercise_id", sa.String(length=64), nullable=False),
        sa.Column("exercise_details", sa.JSON(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("order_in_routine", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["routine_id"], ["routines.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_routine_exercises_routine_id"), "routine_exercises", ["routine_id"], unique=False)

    op.create_table(
        "routine_sets",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("routine_exercise_id", sa.String(length=64), nullable=False),
        sa.Column("set_order", sa.Integer(), nullable=True),
        sa.Column("reps", sa.Integer(), nullable=True),
        sa.Column("weight", sa.Float(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("distance", sa.Float(), nullable=True),
        sa.Column("rest_seconds", sa.Integer(), nullable=True),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.ForeignKeyConstraint(["routine_exercise_id"], ["routine_exercises.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_routine_sets_routine_exercise_id"), "routine_sets", ["routine_exercise_id"], unique=False
    )

    op.create_table(
        "muscle_progress",
        sa.Column("muscle_id", sa.String(length=64), nullable=False),
        sa.Column("xp", sa.Integer(), nullable=False),
        sa.Column("goal", sa.Integer(), nullable=False),
        sa.Column("percentage", sa.Integer(), nullable=False),
        sa.Column("streak", sa.Integer(), nullable=False),
        sa.Column("sets", sa.Integer(), nullable=False),
        sa.Column("last_trained_week", sa.String(length=10), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["muscle_id"], ["muscles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("muscle_id"),
    )


def downgrade() -> None:
    op.drop_table("muscle_progress")
    op.drop_index(op.f("ix_routine_sets_routine_exercise_id"), table_name="routine_sets")
    op.drop_table("routine_sets")
    op.drop_index(op.f("ix_routine_exercises_routine_id"), table_name="routine_exercises")
    op.drop_table("routine_exercises")
    op.drop_index(op.f("ix_routines_title"), table_name="routines")
    op.drop_table("routines")
    op.drop_index(op.f("ix_exercise_notes_exercise_id"), table_name="exercise_notes")
    op.drop_table("exercise_notes")
    op.drop_index("ix_logged_entries_workout_session_id", table_name="logged_entries")
    op.drop_index("ix_logged_entries_exercise_timestamp", table_name="logged_entries")
    op.drop_table("logged_entries")
    op.drop_index("ix_workout_sessions_start_time", table_name="workout_sessions")
    op.drop_table("workout_sessions")
    op.drop_index(op.f("ix_exercise_muscles_muscle_id"), table_name="exercise_muscles")
    op.drop_index(op.f("ix_exercise_muscles_exercise_id"), table_name="exercise_muscles")
    op.drop_table("exercise_muscles")
    op.drop_table("muscles")
    op.drop_index(op.f("ix_exercises_name"), table_name="exercises")
    op.drop_table("exercises")
    for enum_type in (start_method, muscle_role, major_group, exercise_type):
        enum_type.drop(op.get_bind(), checkfirst=True)
