"""
Unit tests for EngagementTracker.

Tests:
- First activity, continuation, same-day idempotence, break after a gap
- longest_streak bookkeeping
- Decay check (reset to 0) vs. restart (reset to 1)
- Milestone events on the increment path
- Concurrent qualifying events on the same day
"""

import threading
from datetime import timedelta

import pytest

from src.engagement import EngagementTracker, StreakState, StreakTransition


@pytest.fixture
def tracker():
    return EngagementTracker(threshold_minutes=1, milestones=[7, 30])


class TestTransitions:
    def test_first_activity_starts_streak(self, tracker, today):
        update = tracker.record_activity(True, today)

        assert update.transition is StreakTransition.STARTED
        assert tracker.current_streak == 1
        assert tracker.longest_streak == 1
        assert tracker.last_active_date == today

    def test_non_qualifying_day_is_ignored(self, tracker, today):
        update = tracker.record_activity(False, today)

        assert update.transition is StreakTransition.NOT_QUALIFIED
        assert not update.changed
        assert tracker.last_active_date is None

    def test_consecutive_day_extends(self, tracker, today):
        tracker.record_activity(True, today - timedelta(days=1))

        update = tracker.record_activity(True, today)

        assert update.transition is StreakTransition.EXTENDED
        assert tracker.current_streak == 2

    def test_same_day_counts_once(self, tracker, today):
        tracker.record_activity(True, today - timedelta(days=1))
        tracker.record_activity(True, today)

        update = tracker.record_activity(True, today)

        assert update.transition is StreakTransition.UNCHANGED
        assert tracker.current_streak == 2

    def test_gap_restarts_at_one(self, today):
        tracker = EngagementTracker(
            threshold_minutes=1,
            milestones=[],
            state=StreakState(
                current_streak=5,
                longest_streak=9,
                last_active_date=today - timedelta(days=3),
            ),
        )

        update = tracker.record_activity(True, today)

        assert update.transition is StreakTransition.RESTARTED
        assert tracker.current_streak == 1
        assert tracker.longest_streak == 9
        assert update.state.streak_start_date == today

    def test_longest_tracks_current(self, tracker, today):
        start = today - timedelta(days=4)
        for offset in range(5):
            tracker.record_activity(True, start + timedelta(days=offset))

        assert tracker.current_streak == 5
        assert tracker.longest_streak == 5
        assert tracker.snapshot().streak_start_date == start

    def test_clock_moving_backwards_is_ignored(self, tracker, today):
        tracker.record_activity(True, today)

        update = tracker.record_activity(True, today - timedelta(days=1))

        assert update.transition is StreakTransition.UNCHANGED
        assert tracker.last_active_date == today

    def test_state_passed_in_is_copied(self, today):
        state = StreakState(current_streak=2, longest_streak=2, last_active_date=today - timedelta(days=1))
        tracker = EngagementTracker(threshold_minutes=1, milestones=[], state=state)

        tracker.record_activity(True, today)

        assert state.current_streak == 2
        assert tracker.current_streak == 3


class TestRecordMinutes:
    def test_threshold_applied(self, today):
        tracker = EngagementTracker(threshold_minutes=10, milestones=[])

        assert tracker.record_minutes(9, today).transition is StreakTransition.NOT_QUALIFIED
        assert tracker.record_minutes(10, today).transition is StreakTransition.STARTED

    def test_defaults_from_settings(self):
        tracker = EngagementTracker()

        assert tracker.threshold_minutes == 1
        assert tracker.milestones == (7, 30)


class TestDecay:
    def test_missed_day_zeroes_streak(self, tracker, today):
        tracker.record_activity(True, today - timedelta(days=2))

        update = tracker.check_decay(today)

        assert update.transition is StreakTransition.DECAYED
        assert tracker.current_streak == 0
        assert tracker.longest_streak == 1

    def test_yesterday_is_still_alive(self, tracker, today):
        tracker.record_activity(True, today - timedelta(days=1))

        update = tracker.check_decay(today)

        assert update.transition is StreakTransition.UNCHANGED
        assert tracker.current_streak == 1

    def test_no_history(self, tracker, today):
        assert tracker.check_decay(today).transition is StreakTransition.UNCHANGED

    def test_activity_after_decay_restarts_at_one(self, tracker, today):
        tracker.record_activity(True, today - timedelta(days=5))
        tracker.check_decay(today)

        update = tracker.record_activity(True, today)

        assert update.transition is StreakTransition.RESTARTED
        assert tracker.current_streak == 1

    def test_decay_does_not_touch_last_active(self, tracker, today):
        last = today - timedelta(days=4)
        tracker.record_activity(True, last)
        tracker.check_decay(today)

        assert tracker.last_active_date == last


class TestMilestones:
    def test_event_when_reaching_milestone(self, today):
        tracker = EngagementTracker(
            threshold_minutes=1,
            milestones=[7],
            state=StreakState(current_streak=6, longest_streak=6, last_active_date=today - timedelta(days=1)),
        )
        events = []
        tracker.add_listener(events.append)

        update = tracker.record_activity(True, today)

        assert [m.streak_days for m in update.milestones] == [7]
        assert events == update.milestones
        assert events[0].achieved_on == today

    def test_no_event_on_start(self, today):
        tracker = EngagementTracker(threshold_minutes=1, milestones=[1])

        assert tracker.record_activity(True, today).milestones == []

    def test_listener_failure_isolated(self, today):
        tracker = EngagementTracker(
            threshold_minutes=1,
            milestones=[2],
            state=StreakState(current_streak=1, longest_streak=1, last_active_date=today - timedelta(days=1)),
        )

        def broken(event):
            raise RuntimeError("push service down")

        tracker.add_listener(broken)

        update = tracker.record_activity(True, today)

        assert tracker.current_streak == 2
        assert len(update.milestones) == 1


class TestReset:
    def test_reset_clears_everything(self, tracker, today):
        tracker.record_activity(True, today)
        tracker.reset()

        assert tracker.snapshot() == StreakState()


class TestConcurrency:
    def test_racing_events_increment_once(self, today):
        tracker = EngagementTracker(
            threshold_minutes=1,
            milestones=[],
            state=StreakState(current_streak=3, longest_streak=3, last_active_date=today - timedelta(days=1)),
        )
        barrier = threading.Barrier(10)

        def record():
            barrier.wait()
            tracker.record_activity(True, today)

        threads = [threading.Thread(target=record) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert tracker.current_streak == 4
