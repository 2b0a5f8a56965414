"""
Study Session Timing.

Components:
- SessionTimer: concurrent registry of in-progress sessions
- LearningActivity: the recorded fact emitted when a session ends
- ActivityLog: in-memory daily aggregation of recorded activities
"""

from src.timing.activity import ActivityLog, ActivityType, LearningActivity
from src.timing.session_timer import SessionTimer, StudySession

__all__ = [
    "SessionTimer",
    "StudySession",
    "LearningActivity",
    "ActivityType",
    "ActivityLog",
]
