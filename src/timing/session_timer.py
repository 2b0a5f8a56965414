"""
Session Timer for Study Activity.

Tracks wall-clock duration of in-progress study/review sessions, each
identified by an opaque UUID handle. Ending a session converts the elapsed
time into credited minutes and emits a LearningActivity to listeners.

Credited duration:
- elapsed seconds truncated to whole minutes
- clamped to [session_min_minutes, session_max_minutes] (default 1..120)
  so a forgotten or backgrounded session cannot inflate statistics

The registry may be touched from several threads at once (a screen close
racing a background timeout), so every insert/lookup/remove happens under
a single lock. Ending an unknown or already-ended handle is a no-op.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID, uuid4

from loguru import logger

from src.timing.activity import ActivityType, LearningActivity

ActivityListener = Callable[[LearningActivity], None]


def local_now() -> datetime:
    """Current local time with its UTC offset, so elapsed time survives DST changes."""
    return datetime.now().astimezone()


@dataclass(frozen=True)
class StudySession:
    """An in-progress timed session."""

    handle: UUID
    subject: str
    started_at: datetime


class SessionTimer:
    """
    Registry of active study sessions keyed by handle.

    Owned by the host; construct one per running app and pass it around.
    """

    def __init__(
        self,
        min_minutes: int | None = None,
        max_minutes: int | None = None,
        clock: Callable[[], datetime] = local_now,
    ):
        """
        Initialize the timer.

        Args:
            min_minutes: Lower clamp for credited minutes (settings default if None)
            max_minutes: Upper clamp for credited minutes (settings default if None)
            clock: Source of the current time (timezone-aware local time by default)
        """
        if min_minutes is None or max_minutes is None:
            from config import get_settings

            settings = get_settings()
            min_minutes = settings.session_min_minutes if min_minutes is None else min_minutes
            max_minutes = settings.session_max_minutes if max_minutes is None else max_minutes

        if min_minutes > max_minutes:
            raise ValueError(f"min_minutes ({min_minutes}) exceeds max_minutes ({max_minutes})")

        self.min_minutes = min_minutes
        self.max_minutes = max_minutes
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: dict[UUID, StudySession] = {}
        self._listeners: list[ActivityListener] = []

    # =========================================================================
    # Listeners
    # =========================================================================

    def add_listener(self, listener: ActivityListener) -> None:
        """Register a callback receiving every recorded LearningActivity."""
        with self._lock:
            self._listeners.append(listener)

    def _emit(self, activity: LearningActivity) -> None:
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(activity)
            except Exception:
                logger.exception(f"Activity listener {listener!r} failed")

    # =========================================================================
    # Session Lifecycle
    # =========================================================================

    def start(self, subject: str) -> UUID:
        """Begin timing a session and return its handle."""
        session = StudySession(handle=uuid4(), subject=subject, started_at=self._clock())
        with self._lock:
            self._sessions[session.handle] = session

        logger.debug(f"Session started: {subject} ({session.handle})")
        return session.handle

    def end(
        self,
        handle: UUID,
        subject: str | None = None,
        note: str | None = None,
        activity_type: ActivityType = ActivityType.REVIEW,
    ) -> LearningActivity | None:
        """
        Finish a session and record its credited duration.

        Args:
            handle: Handle returned by start()
            subject: Subject the activity is recorded against (the one given to start() if None)
            note: Optional free-text note
            activity_type: Kind of activity (review by default)

        Returns:
            The emitted LearningActivity, or None if the handle was unknown
        """
        now = self._clock()
        with self._lock:
            session = self._sessions.pop(handle, None)

        if session is None:
            logger.debug(f"Ignoring end for unknown session {handle}")
            return None

        subject = subject if subject is not None else session.subject
        minutes = self.credited_minutes((now - session.started_at).total_seconds())
        activity = LearningActivity(
            activity_type=activity_type,
            duration_minutes=minutes,
            subject=subject,
            note=note if note is not None else f"Study session: {subject}",
            recorded_at=now,
        )

        logger.info(f"Session ended: {subject}, {minutes} min")
        self._emit(activity)
        return activity

    def cancel(self, handle: UUID) -> bool:
        """Drop a session without recording anything."""
        with self._lock:
            removed = self._sessions.pop(handle, None) is not None

        if removed:
            logger.debug(f"Session cancelled: {handle}")
        return removed

    # =========================================================================
    # Queries
    # =========================================================================

    def elapsed(self, handle: UUID) -> int:
        """Whole minutes elapsed so far; 0 for an unknown handle."""
        with self._lock:
            session = self._sessions.get(handle)

        if session is None:
            return 0
        seconds = (self._clock() - session.started_at).total_seconds()
        return max(0, int(seconds // 60))

    def is_active(self, handle: UUID) -> bool:
        with self._lock:
            return handle in self._sessions

    @property
    def active_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def credited_minutes(self, elapsed_seconds: float) -> int:
        """Truncate to whole minutes and clamp to the configured range."""
        minutes = int(max(0.0, elapsed_seconds) // 60)
        return min(max(minutes, self.min_minutes), self.max_minutes)
