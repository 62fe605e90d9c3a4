from datetime import datetime

import pytest

from workshop_time.core.enums import ActivityKind
from workshop_time.core.exceptions import ValidationError
from workshop_time.intervals.model import ActivityInterval, CategoryTarget, ClosedIntervals, OrderTarget, PresenceInterval
from workshop_time.productivity.calculator.standard_calculator import StandardProductivityCalculator

DAY = datetime(2024, 3, 4)


def at(hour: int, minute: int = 0, day: int = 4) -> datetime:
    return DAY.replace(day=day, hour=hour, minute=minute)


def _activity(interval_id, kind, target, start, end, billable=False, employee_id=1):
    return ActivityInterval(
        interval_id=interval_id,
        employee_id=employee_id,
        kind=kind,
        target=target,
        start=start,
        end=end,
        billable=billable,
    )


def _workshop_day() -> ClosedIntervals:
    return ClosedIntervals(
        presence=[PresenceInterval(interval_id=1, employee_id=1, start=at(8), end=at(16))],
        activity=[
            _activity(2, ActivityKind.WORK, OrderTarget(1), at(8, 10), at(11, 40), billable=True),
            _activity(3, ActivityKind.BREAK, CategoryTarget(1), at(11, 40), at(12, 10)),
            _activity(4, ActivityKind.WORK, CategoryTarget(3), at(12, 10), at(16)),
        ],
    )


def test_full_workshop_day():
    m = StandardProductivityCalculator().window_metrics(1, _workshop_day(), at(0), at(0, day=5))

    assert m.total_attendance_minutes == 480
    assert m.total_break_minutes == 30
    assert m.calculated_work_minutes == 450
    assert m.billable_minutes == 210
    assert m.internal_minutes == 230
    assert m.total_work_minutes == 440
    assert m.attendance_efficiency == 93.75
    assert m.work_productivity == 46.67
    assert m.attendance_days == 1
    assert m.avg_attendance_per_day == 480


def test_intervals_are_clamped_to_window():
    # Window 10:00-12:00 cuts the presence, the billable session and half the break.
    m = StandardProductivityCalculator().window_metrics(1, _workshop_day(), at(10), at(12))

    assert m.total_attendance_minutes == 120
    assert m.billable_minutes == 100
    assert m.total_break_minutes == 20
    assert m.calculated_work_minutes == 100
    assert m.attendance_efficiency == pytest.approx(83.33)
    assert m.work_productivity == 100.0


def test_empty_window_is_all_zero():
    m = StandardProductivityCalculator().window_metrics(1, ClosedIntervals(), at(0), at(0, day=5))

    assert m.total_attendance_minutes == 0
    assert m.calculated_work_minutes == 0
    assert m.attendance_efficiency == 0
    assert m.work_productivity == 0
    assert m.attendance_days == 0
    assert m.avg_attendance_per_day == 0


def test_breaks_exceeding_attendance_never_go_negative():
    intervals = ClosedIntervals(
        presence=[PresenceInterval(interval_id=1, employee_id=1, start=at(8), end=at(9))],
        activity=[_activity(2, ActivityKind.BREAK, CategoryTarget(1), at(8), at(10))],
    )
    m = StandardProductivityCalculator().window_metrics(1, intervals, at(0), at(0, day=5))

    assert m.calculated_work_minutes == 0
    assert m.attendance_efficiency == 0
    assert m.work_productivity == 0


def test_other_employees_rows_are_ignored_and_days_counted():
    intervals = ClosedIntervals(
        presence=[
            PresenceInterval(interval_id=1, employee_id=1, start=at(8), end=at(12)),
            PresenceInterval(interval_id=2, employee_id=1, start=at(8, day=5), end=at(10, day=5)),
            PresenceInterval(interval_id=3, employee_id=2, start=at(8), end=at(18)),
        ],
    )
    m = StandardProductivityCalculator().window_metrics(1, intervals, at(0), at(0, day=6))

    assert m.total_attendance_minutes == 360
    assert m.attendance_days == 2
    assert m.avg_attendance_per_day == 180


def test_inverted_window_is_rejected():
    with pytest.raises(ValidationError):
        StandardProductivityCalculator().window_metrics(1, ClosedIntervals(), at(12), at(8))
