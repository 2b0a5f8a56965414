"""
Learning activity records and in-memory daily aggregation.

A LearningActivity is the fact emitted when a timed study session ends.
The host persists it; ActivityLog keeps an in-process copy so the engine
can answer "how many minutes today" without touching storage.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from datetime import date, datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ActivityType(str, Enum):
    """Kind of study activity a session represents."""

    READING = "reading"
    EXERCISE = "exercise"
    LECTURE = "lecture"
    TEST = "test"
    PROJECT = "project"
    EXPERIMENT = "experiment"
    REVIEW = "review"
    OTHER = "other"


class LearningActivity(BaseModel):
    """A recorded block of study time."""

    model_config = ConfigDict(frozen=True)

    activity_type: ActivityType = ActivityType.REVIEW
    duration_minutes: int = Field(ge=0)
    subject: str
    note: str | None = None
    recorded_at: datetime

    @property
    def day(self) -> date:
        return self.recorded_at.date()


class ActivityLog:
    """
    Thread-safe in-memory sink for LearningActivity facts.

    Activities are bucketed by calendar day with a running minutes total,
    so recording and daily lookups do not rescan the whole history.

    Usable directly as a SessionTimer listener:

        timer.add_listener(log.record)
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._by_day: dict[date, list[LearningActivity]] = defaultdict(list)
        self._minutes_by_day: dict[date, int] = defaultdict(int)

    def record(self, activity: LearningActivity) -> None:
        with self._lock:
            self._by_day[activity.day].append(activity)
            self._minutes_by_day[activity.day] += activity.duration_minutes

    def __len__(self) -> int:
        with self._lock:
            return sum(len(day) for day in self._by_day.values())

    def activities_between(self, start: date, end: date) -> list[LearningActivity]:
        """Activities recorded on any day in [start, end], newest first."""
        with self._lock:
            matched = [
                activity
                for day, activities in self._by_day.items()
                if start <= day <= end
                for activity in activities
            ]
        return sorted(matched, key=lambda a: a.recorded_at, reverse=True)

    def total_minutes(self, day: date) -> int:
        """Sum of minutes recorded on a calendar day."""
        with self._lock:
            return self._minutes_by_day.get(day, 0)

    def has_minimum_learning(self, day: date, minutes: int) -> bool:
        return self.total_minutes(day) >= minutes

    def prune_before(self, cutoff: date) -> int:
        """Drop activities recorded before cutoff; returns how many were removed."""
        with self._lock:
            stale = [day for day in self._by_day if day < cutoff]
            removed = 0
            for day in stale:
                removed += len(self._by_day.pop(day))
                self._minutes_by_day.pop(day, None)
        return removed

    def streak_days(self, today: date) -> int:
        """
        Consecutive study days ending today (or yesterday if nothing yet today).

        Derived purely from recorded activities, independent of any tracker state.
        """
        with self._lock:
            days = set(self._by_day)

        cursor = today
        if cursor not in days:
            cursor = today - timedelta(days=1)

        streak = 0
        while cursor in days:
            streak += 1
            cursor -= timedelta(days=1)
        return streak
