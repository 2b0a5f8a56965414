"""
Habit Formation Challenge.

Same day-granularity transitions as the engagement streak, keyed on its own
(lower) daily-minutes threshold, plus three one-shot medals:

    bronze  7 days
    silver 21 days
    gold   66 days (habit formed)

A medal is earned the first time the streak reaches its length on the
increment path and stays earned until reset() clears everything.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum

from loguru import logger

from src.engagement.streak_tracker import EngagementTracker, MilestoneEvent, StreakState


class HabitMilestone(str, Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"


@dataclass
class HabitMilestoneFlags:
    bronze: bool = False
    silver: bool = False
    gold: bool = False

    def is_set(self, milestone: HabitMilestone) -> bool:
        return getattr(self, milestone.value)

    def copy(self) -> HabitMilestoneFlags:
        return replace(self)


class HabitChallenge(EngagementTracker):
    """Independent streak machine with tiered achievement flags."""

    name = "habit"

    def __init__(
        self,
        threshold_minutes: int | None = None,
        bronze_days: int | None = None,
        silver_days: int | None = None,
        gold_days: int | None = None,
        state: StreakState | None = None,
        flags: HabitMilestoneFlags | None = None,
    ):
        if None in (threshold_minutes, bronze_days, silver_days, gold_days):
            from config import get_settings

            settings = get_settings()
            if threshold_minutes is None:
                threshold_minutes = settings.habit_threshold_minutes
            bronze_days = bronze_days if bronze_days is not None else settings.habit_bronze_days
            silver_days = silver_days if silver_days is not None else settings.habit_silver_days
            gold_days = gold_days if gold_days is not None else settings.habit_gold_days

        self.milestone_days: dict[HabitMilestone, int] = {
            HabitMilestone.BRONZE: bronze_days,
            HabitMilestone.SILVER: silver_days,
            HabitMilestone.GOLD: gold_days,
        }
        super().__init__(
            threshold_minutes=threshold_minutes,
            milestones=self.milestone_days.values(),
            state=state,
        )
        self._flags = flags.copy() if flags else HabitMilestoneFlags()

    @property
    def flags(self) -> HabitMilestoneFlags:
        with self._lock:
            return self._flags.copy()

    def _check_milestones(self, today: date) -> list[MilestoneEvent]:
        current = self._state.current_streak
        earned = []
        for milestone, days in self.milestone_days.items():
            if current >= days and not self._flags.is_set(milestone):
                setattr(self._flags, milestone.value, True)
                earned.append(
                    MilestoneEvent(name=milestone.value, streak_days=days, achieved_on=today)
                )
        return earned

    def reset(self) -> None:
        """Clear counters and medals together."""
        with self._lock:
            self._state = StreakState()
            self._flags = HabitMilestoneFlags()
        logger.info("habit challenge reset")

    def progress_to_next(self) -> tuple[HabitMilestone, int] | None:
        """
        Next unearned medal and the days still needed for it.

        Returns None once gold is earned.
        """
        with self._lock:
            current = self._state.current_streak
            flags = self._flags.copy()

        for milestone, days in self.milestone_days.items():
            if not flags.is_set(milestone):
                return milestone, max(0, days - current)
        return None
