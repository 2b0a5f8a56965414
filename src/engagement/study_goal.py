"""
Daily study-time goal.

Tracks a minutes-per-day target, how much of it has been met, and a goal
streak that is evaluated once per calendar day.
"""

from __future__ import annotations

import math
import threading
from datetime import date

from loguru import logger

from src.scheduling.review_calculator import as_date


class StudyGoal:
    """Daily minutes goal with its own once-a-day streak."""

    def __init__(self, daily_goal_minutes: int | None = None, enabled: bool | None = None):
        if daily_goal_minutes is None or enabled is None:
            from config import get_settings

            settings = get_settings()
            if daily_goal_minutes is None:
                daily_goal_minutes = settings.daily_goal_minutes
            if enabled is None:
                enabled = settings.daily_goal_enabled

        self.daily_goal_minutes = daily_goal_minutes
        self.enabled = enabled
        self.current_streak = 0
        self.best_streak = 0
        self.last_check_date: date | None = None
        self._lock = threading.Lock()

    def update_goal(self, minutes: int) -> None:
        if minutes < 1:
            raise ValueError("daily goal must be at least one minute")
        self.daily_goal_minutes = minutes

    def achievement_rate(self, today_seconds: int) -> float:
        """Fraction of today's goal met, capped at 1.0."""
        if not self.enabled or self.daily_goal_minutes <= 0:
            return 0.0
        rate = (max(0, today_seconds) / 60.0) / self.daily_goal_minutes
        return min(rate, 1.0)

    def check_achievement(self, today_seconds: int, today: date | None = None) -> bool:
        """
        Whether today's goal is met; the first check of a day moves the streak.

        Args:
            today_seconds: Seconds studied today (minutes rounded up)
            today: Reference day (defaults to date.today())
        """
        if not self.enabled:
            return False

        today = as_date(today)
        achieved = math.ceil(max(0, today_seconds) / 60.0) >= self.daily_goal_minutes

        with self._lock:
            if self.last_check_date is None:
                self.current_streak = 1 if achieved else 0
                self.best_streak = self.current_streak
                self.last_check_date = today
            elif self.last_check_date < today:
                if achieved:
                    self.current_streak += 1
                    self.best_streak = max(self.best_streak, self.current_streak)
                else:
                    self.current_streak = 0
                self.last_check_date = today
            else:
                return achieved

        logger.debug(
            f"Daily goal {'met' if achieved else 'missed'} on {today.isoformat()}: "
            f"streak {self.current_streak}, best {self.best_streak}"
        )
        return achieved
