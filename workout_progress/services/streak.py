"""Consecutive-day workout streaks from session dates."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, timedelta


def workout_streak(workout_dates: Sequence[date], today: date | None = None) -> dict:
    """
    Current streak (consecutive days with at least 1 workout, ending today or
    yesterday), longest ever streak, and the date of the last workout.
    `workout_dates` must be distinct and most recent first.
    """
    if not workout_dates:
        return {
            "current_streak": 0,
            "longest_streak": 0,
            "last_workout_date": None,
        }

    today = today or date.today()
    last_workout = workout_dates[0]

    current_streak = 0
    if last_workout >= today - timedelta(days=1):
        current_streak = 1
        for i in range(1, len(workout_dates)):
            if workout_dates[i] == workout_dates[i - 1] - timedelta(days=1):
                current_streak += 1
            else:
                break

    longest = 1
    run = 1
    for i in range(1, len(workout_dates)):
        if workout_dates[i] == workout_dates[i - 1] - timedelta(days=1):
            run += 1
            longest = max(longest, run)
        else:
            run = 1

    return {
        "current_streak": current_streak,
        "longest_streak": longest,
        "last_workout_date": last_workout.isoformat(),
    }
