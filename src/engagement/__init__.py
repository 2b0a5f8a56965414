"""
Engagement Tracking.

Components:
- EngagementTracker: daily study streak with milestone events
- HabitChallenge: 7/21/66-day habit challenge with one-shot medals
- StudyGoal: daily minutes goal and achievement rate
"""

from src.engagement.habit_challenge import HabitChallenge, HabitMilestone, HabitMilestoneFlags
from src.engagement.streak_tracker import (
    EngagementTracker,
    MilestoneEvent,
    StreakState,
    StreakTransition,
    StreakUpdate,
)
from src.engagement.study_goal import StudyGoal

__all__ = [
    "EngagementTracker",
    "StreakState",
    "StreakTransition",
    "StreakUpdate",
    "MilestoneEvent",
    "HabitChallenge",
    "HabitMilestone",
    "HabitMilestoneFlags",
    "StudyGoal",
]
