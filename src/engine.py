"""
Study Engine - host-facing wiring of the scheduling core.

Owns one instance of each stateful component and connects them:

    SessionTimer.end() --LearningActivity--> ActivityLog
                                         +-> EngagementTracker (day's total minutes)
                                         +-> HabitChallenge   (day's total minutes)

and routes review scheduling to ReviewCalculator, or to DeadlineScheduler
when an item has a target date. Nothing here touches storage: returned
values and mutated StudyItem fields are for the host to commit.
"""

from __future__ import annotations

from datetime import date, timedelta

from loguru import logger

from config import Settings, get_settings
from src.engagement import EngagementTracker, HabitChallenge, StreakUpdate, StudyGoal
from src.scheduling import DeadlineScheduler, ReviewCalculator, StudyItem
from src.scheduling.review_calculator import as_date
from src.timing import ActivityLog, LearningActivity, SessionTimer


class StudyEngine:
    """
    One per running app; construct it at startup and pass it to callers.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        timer: SessionTimer | None = None,
    ):
        settings = settings or get_settings()
        self.settings = settings

        self.review_calculator = ReviewCalculator(settings.review_interval_table)
        self.deadline_scheduler = DeadlineScheduler()
        self.timer = timer or SessionTimer(
            min_minutes=settings.session_min_minutes,
            max_minutes=settings.session_max_minutes,
        )
        self.activity_log = ActivityLog()
        self.engagement = EngagementTracker(
            threshold_minutes=settings.engagement_threshold_minutes,
            milestones=settings.engagement_milestones,
        )
        self.habit = HabitChallenge(
            threshold_minutes=settings.habit_threshold_minutes,
            bronze_days=settings.habit_bronze_days,
            silver_days=settings.habit_silver_days,
            gold_days=settings.habit_gold_days,
        )
        self.goal = StudyGoal(
            daily_goal_minutes=settings.daily_goal_minutes,
            enabled=settings.daily_goal_enabled,
        )

        self.timer.add_listener(self._on_activity)

    # =========================================================================
    # Activity
    # =========================================================================

    def _on_activity(self, activity: LearningActivity) -> None:
        self.activity_log.record(activity)
        self.update_streaks(activity.day)

    def update_streaks(self, day: date | None = None) -> tuple[StreakUpdate, StreakUpdate]:
        """Feed the day's aggregated minutes into both streak machines."""
        day = as_date(day)
        total = self.activity_log.total_minutes(day)
        return (
            self.engagement.record_minutes(total, day),
            self.habit.record_minutes(total, day),
        )

    def on_foreground(self, today: date | None = None) -> tuple[StreakUpdate, StreakUpdate]:
        """Periodic decay check for both streak machines; also trims old activity."""
        today = as_date(today)
        removed = self.activity_log.prune_before(
            today - timedelta(days=self.settings.activity_retention_days)
        )
        if removed:
            logger.debug(f"Pruned {removed} activities older than {self.settings.activity_retention_days} days")
        return self.engagement.check_decay(today), self.habit.check_decay(today)

    def goal_progress(self, today: date | None = None) -> float:
        today = as_date(today)
        return self.goal.achievement_rate(self.activity_log.total_minutes(today) * 60)

    # =========================================================================
    # Scheduling
    # =========================================================================

    def schedule_review(self, item: StudyItem, today: date | None = None) -> list[date]:
        """
        Upcoming review dates for an item's current state.

        A single date from ReviewCalculator, or a full plan from
        DeadlineScheduler when the item has a target date.
        """
        if item.target_date is not None:
            return self.deadline_scheduler.plan(
                target_date=item.target_date,
                recall_score=item.recall_score,
                last_reviewed_date=item.last_reviewed_date,
                success_streak_count=item.success_streak_count,
                today=today,
            )

        return [
            self.review_calculator.next_review_date(
                recall_score=item.recall_score,
                last_reviewed_date=item.last_reviewed_date or as_date(today),
                success_streak_count=item.success_streak_count,
            )
        ]

    def review(self, item: StudyItem, recall_score: int, today: date | None = None) -> list[date]:
        """
        Record a self-assessment and reschedule the item.

        Computes the dates from the item's state as of this review, then
        writes score, last reviewed, next review and perfect recall count
        back onto the item for the host to commit.
        """
        today = as_date(today)
        item.recall_score = recall_score
        item.last_reviewed_date = today
        dates = self.schedule_review(item, today)
        item.apply_review(recall_score, dates[0], today)

        logger.info(
            f"Reviewed '{item.title}' at {item.recall_score}%: next {dates[0].isoformat()}"
            + (f" ({len(dates)} planned before {item.target_date.isoformat()})" if item.target_date else "")
        )
        return dates
