"""
Daily Engagement Streak Tracker.

Day-granularity state machine over "did the learner meet today's activity
threshold":

    no history           -> day 1
    same day again       -> unchanged (already counted)
    next calendar day    -> extended (streak + 1)
    gap of 2+ days       -> restarted at day 1

A separate decay check (app foreground, not activity) zeroes the streak
when the last active day is more than one day behind and nothing new has
been recorded. longest_streak never drops below current_streak.

Each tracker owns its state and serialises mutations with its own lock, so
two sessions finishing at once cannot lose an increment.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum

from loguru import logger

from src.scheduling.review_calculator import as_date


class StreakTransition(str, Enum):
    """Outcome of feeding one day into a streak machine."""

    STARTED = "started"
    EXTENDED = "extended"
    RESTARTED = "restarted"
    UNCHANGED = "unchanged"
    NOT_QUALIFIED = "not_qualified"
    DECAYED = "decayed"


@dataclass
class StreakState:
    """Counters for one streak machine."""

    current_streak: int = 0
    longest_streak: int = 0
    last_active_date: date | None = None
    streak_start_date: date | None = None

    def copy(self) -> StreakState:
        return replace(self)


@dataclass(frozen=True)
class MilestoneEvent:
    """Raised the moment a streak reaches a milestone length."""

    name: str
    streak_days: int
    achieved_on: date


@dataclass
class StreakUpdate:
    """Result of a streak transition."""

    transition: StreakTransition
    state: StreakState
    milestones: list[MilestoneEvent] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.transition not in (
            StreakTransition.UNCHANGED,
            StreakTransition.NOT_QUALIFIED,
        )


MilestoneListener = Callable[[MilestoneEvent], None]


def day_difference(earlier: date, later: date) -> int:
    return (later - earlier).days


class EngagementTracker:
    """
    Daily study streak.

    Construct one per running app and pass it to whoever records activity;
    tests build their own instances.
    """

    name = "engagement"

    def __init__(
        self,
        threshold_minutes: int | None = None,
        milestones: Iterable[int] | None = None,
        state: StreakState | None = None,
    ):
        """
        Initialize tracker.

        Args:
            threshold_minutes: Minutes per day needed to qualify (settings default if None)
            milestones: Streak lengths that raise events (settings default if None)
            state: Previously persisted state to resume from
        """
        if threshold_minutes is None or milestones is None:
            from config import get_settings

            settings = get_settings()
            if threshold_minutes is None:
                threshold_minutes = settings.engagement_threshold_minutes
            if milestones is None:
                milestones = settings.engagement_milestones

        self.threshold_minutes = threshold_minutes
        self.milestones = tuple(sorted(set(milestones)))
        self._state = state.copy() if state else StreakState()
        self._lock = threading.Lock()
        self._listeners: list[MilestoneListener] = []

    # =========================================================================
    # State
    # =========================================================================

    @property
    def current_streak(self) -> int:
        with self._lock:
            return self._state.current_streak

    @property
    def longest_streak(self) -> int:
        with self._lock:
            return self._state.longest_streak

    @property
    def last_active_date(self) -> date | None:
        with self._lock:
            return self._state.last_active_date

    def snapshot(self) -> StreakState:
        """Copy of the current state for the caller to persist."""
        with self._lock:
            return self._state.copy()

    def add_listener(self, listener: MilestoneListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    # =========================================================================
    # Transitions
    # =========================================================================

    def qualifies(self, total_minutes_today: int) -> bool:
        return total_minutes_today >= self.threshold_minutes

    def record_minutes(self, total_minutes_today: int, today: date | None = None) -> StreakUpdate:
        """Feed today's aggregated study minutes."""
        return self.record_activity(self.qualifies(total_minutes_today), today)

    def record_activity(self, qualifies: bool, today: date | None = None) -> StreakUpdate:
        """
        Apply a study event for today.

        Args:
            qualifies: Whether today's activity meets the threshold
            today: Reference day (defaults to date.today())

        Returns:
            StreakUpdate with the transition, new state and any milestones
        """
        today = as_date(today)

        with self._lock:
            if not qualifies:
                return StreakUpdate(StreakTransition.NOT_QUALIFIED, self._state.copy())

            state = self._state
            if state.last_active_date is None:
                transition = StreakTransition.STARTED
                state.current_streak = 1
                state.streak_start_date = today
            else:
                diff = day_difference(state.last_active_date, today)
                if diff <= 0:
                    return StreakUpdate(StreakTransition.UNCHANGED, state.copy())
                if diff == 1:
                    transition = StreakTransition.EXTENDED
                    state.current_streak += 1
                    if state.streak_start_date is None:
                        state.streak_start_date = state.last_active_date
                else:
                    transition = StreakTransition.RESTARTED
                    state.current_streak = 1
                    state.streak_start_date = today

            state.longest_streak = max(state.longest_streak, state.current_streak)
            state.last_active_date = today

            milestones: list[MilestoneEvent] = []
            if transition is StreakTransition.EXTENDED:
                milestones = self._check_milestones(today)

            update = StreakUpdate(transition, state.copy(), milestones)
            listeners = list(self._listeners)

        logger.info(
            f"{self.name} streak {transition.value}: "
            f"{update.state.current_streak} day(s), best {update.state.longest_streak}"
        )
        self._dispatch(update.milestones, listeners)
        return update

    def check_decay(self, today: date | None = None) -> StreakUpdate:
        """
        Zero the streak if a day was missed without new activity.

        Intended for app-foreground checks; never counts as activity.
        """
        today = as_date(today)

        with self._lock:
            state = self._state
            if state.last_active_date is None or state.current_streak == 0:
                return StreakUpdate(StreakTransition.UNCHANGED, state.copy())

            if day_difference(state.last_active_date, today) <= 1:
                return StreakUpdate(StreakTransition.UNCHANGED, state.copy())

            previous = state.current_streak
            state.current_streak = 0
            state.streak_start_date = None
            update = StreakUpdate(StreakTransition.DECAYED, state.copy())

        logger.info(f"{self.name} streak lapsed after {previous} day(s)")
        return update

    def reset(self) -> None:
        """Clear all counters."""
        with self._lock:
            self._state = StreakState()
        logger.info(f"{self.name} streak reset")

    # =========================================================================
    # Milestones
    # =========================================================================

    def _check_milestones(self, today: date) -> list[MilestoneEvent]:
        """Called under the lock, on the increment path only."""
        current = self._state.current_streak
        return [
            MilestoneEvent(name=f"{self.name}_{days}_days", streak_days=days, achieved_on=today)
            for days in self.milestones
            if days == current
        ]

    def _dispatch(self, events: list[MilestoneEvent], listeners: list[MilestoneListener]) -> None:
        for event in events:
            logger.info(f"Milestone reached: {event.name} ({event.streak_days} days)")
            for listener in listeners:
                try:
                    listener(event)
                except Exception:
                    logger.exception(f"Milestone listener {listener!r} failed")
