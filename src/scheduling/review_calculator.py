"""
Next-Review Date Calculator.

Single-step scheduling from a learner's self-rated recall score (0-100)
and their perfect recall count (consecutive fully-confident reviews).

    score_factor   = 0.5 + score / 100              (0.5 .. 1.5)
    base_interval  = TABLE[count]      if count < 7
                   = max(30, count * 7) otherwise   (linear in weeks)
    days_until     = round(base_interval * score_factor), at least 1
    next_review    = last_reviewed + days_until

Higher confidence stretches the gap; the table stops growing exponentially
once exhausted so sustained mastery is rewarded without runaway intervals.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta

from loguru import logger

DEFAULT_INTERVAL_TABLE: tuple[int, ...] = (1, 3, 7, 14, 30, 60, 120)

# Counts 0-6 use the table; the linear rule takes over from 7
TABLE_LENGTH = 7

# Past the table, intervals grow by a week per perfect recall with this floor
LINEAR_FLOOR_DAYS = 30
LINEAR_DAYS_PER_RECALL = 7


def check_interval_table(table) -> None:
    """Raise ValueError unless table holds TABLE_LENGTH non-decreasing intervals of 1+ days."""
    if len(table) != TABLE_LENGTH:
        raise ValueError(f"interval table needs exactly {TABLE_LENGTH} entries, got {len(table)}")
    if min(table) < 1:
        raise ValueError("interval table entries must be at least 1 day")
    if any(later < earlier for earlier, later in zip(table, table[1:])):
        raise ValueError("interval table must be non-decreasing")


def clamp_score(recall_score: int | float) -> int:
    """Clamp a recall score into 0..100."""
    return int(min(max(recall_score, 0), 100))


def as_date(value: date | datetime | None, default: date | None = None) -> date:
    """Normalise a date/datetime (or None) to a calendar date."""
    if value is None:
        return default or date.today()
    if isinstance(value, datetime):
        return value.date()
    return value


class ReviewCalculator:
    """
    Pure next-review-date calculator.

    Stateless apart from the interval table; safe to share across threads.
    """

    def __init__(self, interval_table: tuple[int, ...] | list[int] | None = None):
        table = tuple(interval_table or DEFAULT_INTERVAL_TABLE)
        check_interval_table(table)
        self.interval_table = table

    @staticmethod
    def score_factor(recall_score: int) -> float:
        return 0.5 + clamp_score(recall_score) / 100

    def base_interval(self, success_streak_count: int) -> int:
        """Base interval in days for a perfect recall count."""
        count = max(0, success_streak_count)
        if count < TABLE_LENGTH:
            return self.interval_table[count]
        return max(LINEAR_FLOOR_DAYS, count * LINEAR_DAYS_PER_RECALL)

    def interval_days(self, recall_score: int, success_streak_count: int) -> int:
        """
        Days until the next review.

        Rounds half up and never returns less than one day, so the result
        is always strictly after the last review.
        """
        raw = self.base_interval(success_streak_count) * self.score_factor(recall_score)
        if raw < 1:
            return 1
        return max(1, math.floor(raw + 0.5))

    def next_review_date(
        self,
        recall_score: int,
        last_reviewed_date: date | datetime | None = None,
        success_streak_count: int = 0,
    ) -> date:
        """
        Calculate the next review date.

        Args:
            recall_score: Self-rated recall 0-100 (clamped if outside)
            last_reviewed_date: Day of the last review (today if None)
            success_streak_count: Perfect recall count (negative treated as 0)

        Returns:
            Calendar date of the next review
        """
        base_day = as_date(last_reviewed_date)
        days = self.interval_days(recall_score, success_streak_count)
        next_day = base_day + timedelta(days=days)

        logger.debug(
            f"Next review: score={clamp_score(recall_score)} "
            f"count={max(0, success_streak_count)} -> +{days}d ({next_day.isoformat()})"
        )
        return next_day


def calculate_next_review_date(
    recall_score: int,
    last_reviewed_date: date | datetime | None = None,
    success_streak_count: int = 0,
) -> date:
    """Module-level shortcut using the default interval table."""
    return ReviewCalculator().next_review_date(
        recall_score, last_reviewed_date, success_streak_count
    )


def is_due(next_review_date: date | None, today: date | None = None) -> bool:
    """An item with no scheduled date is always due."""
    if next_review_date is None:
        return True
    return as_date(today) >= next_review_date
