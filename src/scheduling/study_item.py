"""
Study item fields the scheduler reads and writes.

The host owns persistence; a StudyItem is the plain view of one stored item
handed to the engine. apply_review() mutates the fields in place and the
caller commits them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from src.scheduling.review_calculator import as_date, clamp_score

# Self-rated recall at or above this counts as a perfect recall
PERFECT_RECALL_THRESHOLD = 90


@dataclass
class StudyItem:
    """Scheduling state of one study item."""

    title: str = ""
    recall_score: int = 0
    last_reviewed_date: date | None = None
    next_review_date: date | None = None
    success_streak_count: int = 0  # a.k.a. perfect recall count
    target_date: date | None = None  # optional deadline (exam date)
    review_count: int = 0

    def apply_review(
        self,
        recall_score: int,
        next_review_date: date,
        reviewed_on: date | None = None,
    ) -> None:
        """
        Record a completed review.

        A perfect recall extends the success streak; anything less resets it,
        since the count tracks consecutive fully-confident reviews.
        """
        score = clamp_score(recall_score)
        self.recall_score = score
        self.last_reviewed_date = as_date(reviewed_on)
        self.next_review_date = next_review_date
        self.review_count += 1
        if score >= PERFECT_RECALL_THRESHOLD:
            self.success_streak_count = max(0, self.success_streak_count) + 1
        else:
            self.success_streak_count = 0
