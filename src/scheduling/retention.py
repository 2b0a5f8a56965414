"""
Memory retention estimates for display alongside the review schedule.

Two scores, both 0-100:
- simple: recall score discounted to 80% plus 5 points per perfect recall
- enhanced: exponential forgetting since the last review, offset by
  reinforcement from the number of reviews and high-scoring reviews
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date, datetime

from src.scheduling.review_calculator import as_date, clamp_score

FORGETTING_RATE = 0.05  # per day
REVIEW_EFFECT_PER_REVIEW = 0.15
REVIEW_EFFECT_CAP = 0.75
HIGH_SCORE_THRESHOLD = 80
HIGH_SCORE_BONUS = 4.0
HIGH_SCORE_BONUS_CAP = 20.0


class RetentionCalculator:
    """Stateless retention score helpers."""

    @staticmethod
    def simple_score(recall_score: int, perfect_recall_count: int) -> int:
        base = clamp_score(recall_score) * 0.8
        bonus = max(0, perfect_recall_count) * 5.0
        return int(min(100.0, base + bonus))

    @staticmethod
    def enhanced_score(
        recall_score: int,
        days_since_last_review: int,
        review_count: int,
        high_score_count: int,
    ) -> int:
        """
        Forgetting-curve adjusted retention.

        Args:
            recall_score: Latest self-rated recall 0-100
            days_since_last_review: Whole days since the last review
            review_count: Number of reviews performed
            high_score_count: Reviews rated HIGH_SCORE_THRESHOLD or above

        Returns:
            Retention estimate 0-100
        """
        base = float(clamp_score(recall_score))
        decay = math.exp(-FORGETTING_RATE * max(0, days_since_last_review))
        review_effect = min(REVIEW_EFFECT_CAP, max(0, review_count) * REVIEW_EFFECT_PER_REVIEW)
        stabilization = min(HIGH_SCORE_BONUS_CAP, max(0, high_score_count) * HIGH_SCORE_BONUS)

        score = base * (decay + review_effect) + stabilization
        return int(max(0.0, min(100.0, score)))

    @staticmethod
    def count_high_scores(scores: Iterable[int]) -> int:
        return sum(1 for s in scores if s >= HIGH_SCORE_THRESHOLD)

    @staticmethod
    def days_since(last_review: date | datetime | None, today: date | None = None) -> int:
        if last_review is None:
            return 0
        return max(0, (as_date(today) - as_date(last_review)).days)
