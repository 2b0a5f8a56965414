"""
Review Scheduling Module.

Provides:
- ReviewCalculator: next review date from recall score and perfect recall count
- DeadlineScheduler: multi-review plan that finishes before a target date
- RetentionCalculator: retention estimates for display
- StudyItem: the item fields the scheduler reads and writes
"""

from src.scheduling.deadline_scheduler import DeadlineScheduler, calculate_review_plan
from src.scheduling.retention import RetentionCalculator
from src.scheduling.review_calculator import (
    DEFAULT_INTERVAL_TABLE,
    ReviewCalculator,
    calculate_next_review_date,
    is_due,
)
from src.scheduling.study_item import PERFECT_RECALL_THRESHOLD, StudyItem

__all__ = [
    "ReviewCalculator",
    "DeadlineScheduler",
    "RetentionCalculator",
    "StudyItem",
    "DEFAULT_INTERVAL_TABLE",
    "PERFECT_RECALL_THRESHOLD",
    "calculate_next_review_date",
    "calculate_review_plan",
    "is_due",
]
