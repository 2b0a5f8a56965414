"""
Deadline-Driven Review Planner.

Plans a sequence of reviews between today and a fixed target date (an
exam, a presentation) instead of the open-ended single-step interval.

Steps:
1. Estimate how many reviews are needed from recall score, perfect recall
   count and time remaining.
2. Spread them with geometrically growing gaps (spacing effect): early
   reviews close together, later ones further apart.
3. Greedily trim the largest gap until the plan fits before the deadline.

The plan never extends past the target date and is never empty.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta

from loguru import logger

from src.scheduling.review_calculator import as_date, clamp_score


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class DeadlineScheduler:
    """Pure planner producing ReviewPlans (ordered lists of dates)."""

    # Recall thresholds for the base review count
    HIGH_RECALL = 80
    MEDIUM_RECALL = 50

    # Each perfect recall shaves 10% off the estimate, down to half
    EXPERIENCE_STEP = 0.1
    EXPERIENCE_FLOOR = 0.5

    # Time pressure multipliers
    CRAM_DAYS = 3
    WEEK_DAYS = 7
    CRAM_FACTOR = 1.2
    WEEK_FACTOR = 1.0
    RELAXED_FACTOR = 0.8

    def estimate_required_reviews(
        self,
        recall_score: int,
        days_until_target: int,
        success_streak_count: int = 0,
    ) -> int:
        """
        Estimate reviews needed before the deadline.

        Returns:
            A count in [1, days_until_target] (0 only if no days remain)
        """
        if days_until_target <= 0:
            return 0

        score = clamp_score(recall_score)
        if score >= self.HIGH_RECALL:
            base_count = 1.0
        elif score >= self.MEDIUM_RECALL:
            base_count = 2.0
        else:
            base_count = 3.0

        count = max(0, success_streak_count)
        experience_factor = max(self.EXPERIENCE_FLOOR, 1.0 - count * self.EXPERIENCE_STEP)

        if days_until_target <= self.CRAM_DAYS:
            days_factor = self.CRAM_FACTOR
        elif days_until_target <= self.WEEK_DAYS:
            days_factor = self.WEEK_FACTOR
        else:
            days_factor = self.RELAXED_FACTOR

        estimate = _round_half_up(base_count * experience_factor * days_factor)
        return min(days_until_target, max(1, estimate))

    @staticmethod
    def spaced_intervals(review_count: int, total_days: int) -> list[int]:
        """
        Geometrically increasing gaps (in days) that sum to at most total_days.

        ratio = total_days ** (1 / review_count); the i-th review lands near
        ratio ** i days out. Rounding can overshoot, so the largest gap is
        shrunk one day at a time until the plan fits.
        """
        if review_count <= 0 or total_days <= 0:
            return []

        ratio = total_days ** (1.0 / review_count)

        intervals: list[int] = []
        cumulative = 0
        for i in range(1, review_count + 1):
            target_cumulative = _round_half_up(ratio**i)
            interval = max(1, target_cumulative - cumulative)
            intervals.append(interval)
            cumulative += interval

        while sum(intervals) > total_days and len(intervals) > 1:
            largest = max(range(len(intervals)), key=lambda idx: intervals[idx])
            intervals[largest] -= 1
            if intervals[largest] < 1:
                del intervals[largest]

        return intervals

    def plan(
        self,
        target_date: date | datetime,
        recall_score: int,
        last_reviewed_date: date | datetime | None = None,
        success_streak_count: int = 0,
        today: date | None = None,
    ) -> list[date]:
        """
        Build a review plan that finishes by target_date.

        Args:
            target_date: Deadline (inclusive)
            recall_score: Current self-rated recall 0-100
            last_reviewed_date: Last review day; the plan is anchored on today
            success_streak_count: Perfect recall count
            today: Reference day (defaults to date.today())

        Returns:
            Non-empty, strictly increasing list of dates, last <= target_date.
            [today] when the deadline is today or already passed.
        """
        today = as_date(today)
        target = as_date(target_date)
        days_until_target = (target - today).days

        if days_until_target <= 0:
            logger.debug(f"Deadline {target.isoformat()} reached; review today")
            return [today]

        required = self.estimate_required_reviews(
            recall_score, days_until_target, success_streak_count
        )
        if required <= 0:
            return [today]

        intervals = self.spaced_intervals(required, days_until_target)

        dates: list[date] = []
        current = today
        for interval in intervals:
            current = current + timedelta(days=interval)
            dates.append(current)

        if not dates:
            return [today]

        last_reviewed = (
            as_date(last_reviewed_date).isoformat() if last_reviewed_date else "never"
        )
        logger.debug(
            f"Deadline plan: target={target.isoformat()} ({days_until_target}d), "
            f"score={clamp_score(recall_score)}, count={max(0, success_streak_count)}, "
            f"last={last_reviewed}, required={required}, "
            f"dates={[d.isoformat() for d in dates]}"
        )
        return dates


def calculate_review_plan(
    target_date: date | datetime,
    recall_score: int,
    last_reviewed_date: date | datetime | None = None,
    success_streak_count: int = 0,
    today: date | None = None,
) -> list[date]:
    """Module-level shortcut for DeadlineScheduler().plan()."""
    return DeadlineScheduler().plan(
        target_date, recall_score, last_reviewed_date, success_streak_count, today
    )
