from datetime import datetime

import pytest

from workshop_time.activity.tracker import ActivityTracker
from workshop_time.core.enums import ActivityKind, ActivityState
from workshop_time.core.exceptions import (
    AlreadyOnBreakError,
    AlreadyWorkingError,
    InvalidIntervalError,
    NoActiveBreakError,
    NoActiveWorkError,
    NotPresentError,
    UnknownTargetError,
)
from workshop_time.intervals.memory_repository import InMemoryIntervalStore
from workshop_time.intervals.model import CategoryTarget, OrderTarget
from workshop_time.presence.tracker import PresenceTracker
from workshop_time.targets.static_classifier import StaticTargetClassifier

DAY = datetime(2024, 3, 4)


def at(hour: int, minute: int = 0) -> datetime:
    return DAY.replace(hour=hour, minute=minute)


def _setup(clock_in: bool = True):
    store = InMemoryIntervalStore()
    classifier = StaticTargetClassifier(
        active_orders={1},
        activity_categories={3: False, 4: True},
        break_categories={1, 2},
    )
    if clock_in:
        PresenceTracker(store).clock_in(1, at(8))
    return store, ActivityTracker(store, classifier)


def test_break_round_trip():
    store, tracker = _setup()

    rec = tracker.start_break(1, 1, at(10), note="coffee")
    assert rec.kind == ActivityKind.BREAK
    assert rec.billable is False
    assert rec.target == CategoryTarget(1)
    assert tracker.state(1) == ActivityState.ON_BREAK

    outcome = tracker.stop_break(1, at(10, 15))
    assert outcome.duration_minutes == 15
    assert tracker.state(1) == ActivityState.IDLE


def test_work_on_order_is_billable_and_on_internal_category_is_not():
    _, tracker = _setup()

    rec = tracker.start_work(1, OrderTarget(1), at(8, 10), task_description="Brake pads")
    assert rec.billable is True
    assert rec.note == "Brake pads"
    outcome = tracker.stop_work(1, at(11, 40))
    assert outcome.duration_minutes == 210
    assert outcome.billable is True
    assert outcome.target == OrderTarget(1)

    rec = tracker.start_work(1, CategoryTarget(3), at(12))
    assert rec.billable is False
    tracker.stop_work(1, at(13))

    # billable activity category
    assert tracker.start_work(1, CategoryTarget(4), at(13)).billable is True


def test_activities_require_presence():
    _, tracker = _setup(clock_in=False)

    with pytest.raises(NotPresentError):
        tracker.start_break(1, 1, at(10))
    with pytest.raises(NotPresentError):
        tracker.start_work(1, OrderTarget(1), at(10))


def test_break_and_work_are_mutually_exclusive():
    store, tracker = _setup()
    tracker.start_work(1, OrderTarget(1), at(9))

    with pytest.raises(AlreadyWorkingError):
        tracker.start_break(1, 1, at(10))
    with pytest.raises(AlreadyWorkingError):
        tracker.start_work(1, CategoryTarget(3), at(10))
    with pytest.raises(NoActiveBreakError):
        tracker.stop_break(1, at(10))

    tracker.stop_work(1, at(10))
    tracker.start_break(1, 2, at(10))
    with pytest.raises(AlreadyOnBreakError):
        tracker.start_work(1, OrderTarget(1), at(10, 5))
    with pytest.raises(AlreadyOnBreakError):
        tracker.start_break(1, 1, at(10, 5))
    with pytest.raises(NoActiveWorkError):
        tracker.stop_work(1, at(10, 5))

    _, activity = store.all_intervals(1)
    assert len(activity) == 2


def test_unknown_targets_are_rejected():
    _, tracker = _setup()

    with pytest.raises(UnknownTargetError):
        tracker.start_work(1, OrderTarget(99), at(9))
    with pytest.raises(UnknownTargetError):
        tracker.start_work(1, CategoryTarget(1), at(9))  # break category, not an activity
    with pytest.raises(UnknownTargetError):
        tracker.start_break(1, 3, at(9))  # activity category, not a break


def test_activity_cannot_start_before_presence_or_overlap_previous():
    _, tracker = _setup()

    with pytest.raises(InvalidIntervalError):
        tracker.start_break(1, 1, at(7, 30))

    tracker.start_work(1, OrderTarget(1), at(9))
    with pytest.raises(InvalidIntervalError):
        tracker.stop_work(1, at(8, 30))
    tracker.stop_work(1, at(10))

    with pytest.raises(InvalidIntervalError):
        tracker.start_break(1, 1, at(9, 30))
    tracker.start_break(1, 1, at(10))
