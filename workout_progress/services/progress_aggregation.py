"""Progress aggregation: fold XP awards into muscle progress and roll up major groups.

Percentages are stored unbounded (a muscle past its goal reads above 100);
`display_percentage` clamps to 0..100 for rendering.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, timedelta

from workout_progress.core.constants import MAJOR_GROUP_TARGET, MUSCLE_TO_GROUP, XP_PER_LEVEL
from workout_progress.core.enums import MajorMuscleGroup
from workout_progress.schemas.catalog import CatalogMuscle
from workout_progress.schemas.progress import MajorGroupProgress, MuscleProgress, XPResult


def percentage_of_goal(xp: int, goal: int) -> int:
    if goal <= 0:
        return 0
    return round(xp / goal * 100)


def display_percentage(percentage: float) -> int:
    return int(max(0, min(100, percentage)))


def iso_week(day: date) -> str:
    year, week, _ = day.isocalendar()
    return f"{year}-W{week:02d}"


def next_streak(progress: MuscleProgress, trained_on: date) -> int:
    """Consecutive ISO weeks with XP, counting the week of `trained_on`."""
    this_week = iso_week(trained_on)
    if progress.last_trained_week == this_week:
        return max(progress.streak, 1)
    if progress.last_trained_week == iso_week(trained_on - timedelta(weeks=1)):
        return progress.streak + 1
    return 1


def initial_progress(
    muscles: Iterable[CatalogMuscle],
    stored: Mapping[str, MuscleProgress] | None = None,
    default_goal: int = 500,
) -> dict[str, MuscleProgress]:
    """One progress record per catalog muscle; stored values win, has_exercises comes from the catalog."""
    stored = stored or {}
    progress: dict[str, MuscleProgress] = {}
    for muscle in muscles:
        existing = stored.get(muscle.id)
        if existing is not None:
            progress[muscle.id] = existing.model_copy(update={"has_exercises": muscle.has_exercises})
            continue
        goal = (muscle.goal or default_goal) if muscle.has_exercises else 0
        progress[muscle.id] = MuscleProgress(goal=goal, has_exercises=muscle.has_exercises)
    return progress


def apply_xp(
    individual_progress: Mapping[str, MuscleProgress],
    xp_awards: Iterable[XPResult],
    trained_on: date | None = None,
) -> dict[str, MuscleProgress]:
    """
    Add each award to its muscle: XP grows, the set counter increments and the
    percentage is recomputed. Muscles absent from the map or without catalog
    exercises receive nothing. Returns a new map; the input is not modified.
    """
    trained_on = trained_on or date.today()
    updated = {k: v.model_copy() for k, v in individual_progress.items()}
    for result in xp_awards:
        for award in result.muscle_xp_distribution:
            current = updated.get(award.muscle_id)
            if current is None or not current.has_exercises:
                continue
            xp = current.xp + award.xp_awarded
            updated[award.muscle_id] = current.model_copy(
                update={
                    "xp": xp,
                    "sets": current.sets + 1,
                    "percentage": percentage_of_goal(xp, current.goal),
                    "streak": next_streak(current, trained_on),
                    "last_trained_week": iso_week(trained_on),
                }
            )
    return updated


def muscle_groups(muscles: Iterable[CatalogMuscle]) -> dict[str, MajorMuscleGroup]:
    """Major group per muscle id; the catalog's value wins over the built-in table."""
    groups = dict(MUSCLE_TO_GROUP)
    groups.update({m.id: m.major_group for m in muscles if m.major_group is not None})
    return groups


def rollup_major_groups(
    individual_progress: Mapping[str, MuscleProgress],
    groups_by_muscle: Mapping[str, MajorMuscleGroup] | None = None,
) -> list[MajorGroupProgress]:
    """
    Per major group: percentage is the highest percentage among its muscles
    that have exercises (the best-trained muscle, against a target of 100).
    XP and sets are summed for the level display. Muscles are grouped by
    `groups_by_muscle` (see `muscle_groups`), else by the built-in table.
    """
    groups_by_muscle = groups_by_muscle if groups_by_muscle is not None else MUSCLE_TO_GROUP
    groups: dict[MajorMuscleGroup, list[tuple[str, MuscleProgress]]] = {g: [] for g in MajorMuscleGroup}
    for muscle_id, progress in individual_progress.items():
        group = groups_by_muscle.get(muscle_id)
        if group is None or not progress.has_exercises:
            continue
        groups[group].append((muscle_id, progress))

    rollup = []
    for group, members in groups.items():
        xp = sum(p.xp for _, p in members)
        percentage = max((p.percentage for _, p in members), default=0)
        level = max(1, xp // XP_PER_LEVEL + 1)
        rollup.append(
            MajorGroupProgress(
                major_group=group,
                level=level,
                xp=xp,
                next_level=level * XP_PER_LEVEL,
                percentage=percentage,
                display_percentage=display_percentage(percentage * 100 / MAJOR_GROUP_TARGET),
                streak=max((p.streak for _, p in members), default=0),
                sets=sum(p.sets for _, p in members),
                muscles=[m for m, _ in members],
            )
        )
    return rollup


def visible_muscles(individual_progress: Mapping[str, MuscleProgress]) -> dict[str, MuscleProgress]:
    """Muscles shown by default: those the catalog has exercises for."""
    return {k: v for k, v in individual_progress.items() if v.has_exercises}
