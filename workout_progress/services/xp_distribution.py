"""XP distribution: turn one completed entry into per-muscle XP awards.

Each muscle's award is BASE_XP_PER_SET x role multiplier x RPE multiplier,
times the PR bonus when the entry set a record, rounded per muscle. The entry
total is the sum of the rounded awards, so totals always match the breakdown.
"""

from __future__ import annotations

from collections.abc import Iterable

from workout_progress.core.constants import (
    BASE_XP_PER_SET,
    MAX_RPE_MULTIPLIER,
    MIN_RPE_MULTIPLIER,
    MULTIPLE_TARGET_FACTOR,
    PR_XP_BONUS_MULTIPLIER,
    ROLE_MULTIPLIERS,
    RPE_MAX,
)
from workout_progress.core.enums import MuscleRole
from workout_progress.schemas.catalog import MuscleInvolvement
from workout_progress.schemas.progress import MuscleXPAward, XPResult


def rpe_multiplier(rpe: int | None) -> float:
    """RPE 10 -> 1.0, RPE 1 -> 0.1, linear in between. Missing RPE counts as maximal effort."""
    if rpe is None:
        rpe = RPE_MAX
    return max(MIN_RPE_MULTIPLIER, min(MAX_RPE_MULTIPLIER, rpe / RPE_MAX))


def role_multiplier(role: MuscleRole, multiple_targets: bool) -> float:
    if role == MuscleRole.TARGET and multiple_targets:
        return MULTIPLE_TARGET_FACTOR
    return ROLE_MULTIPLIERS[role]


def calculate_xp_distribution(
    involvements: Iterable[MuscleInvolvement] | None,
    rpe: int | None = RPE_MAX,
    is_pr: bool = False,
) -> XPResult:
    """Per-muscle XP for one completed entry. No muscle data means zero XP."""
    involvements = list(involvements or [])
    multiple_targets = sum(1 for m in involvements if m.role == MuscleRole.TARGET) > 1
    effort = rpe_multiplier(rpe)
    bonus = PR_XP_BONUS_MULTIPLIER if is_pr else 1.0

    awards = []
    for involvement in involvements:
        multiplier = role_multiplier(involvement.role, multiple_targets) * effort * bonus
        awards.append(
            MuscleXPAward(
                muscle_id=involvement.muscle_id,
                role=involvement.role,
                xp_awarded=round(BASE_XP_PER_SET * multiplier),
                multiplier=multiplier,
            )
        )
    return XPResult(
        total_xp=sum(a.xp_awarded for a in awards),
        muscle_xp_distribution=awards,
    )
