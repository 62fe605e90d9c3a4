from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import overlap_minutes, round_percent
from ...core.enums import ActivityKind
from ...core.exceptions import ValidationError
from ...intervals.model import ClosedIntervals
from ..model import DerivedMetrics
from .base import ProductivityCalculator


def _ratio(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    return round_percent(100.0 * numerator / denominator)


class StandardProductivityCalculator(ProductivityCalculator):
    """Standard rule: work = attendance - breaks (idle time counts as work).

    attendance efficiency = work / attendance, work productivity = billable / work.
    """

    def window_metrics(
        self,
        employee_id: int,
        intervals: ClosedIntervals,
        window_start: datetime,
        window_end: datetime,
    ) -> DerivedMetrics:
        if window_end <= window_start:
            raise ValidationError("Window end must be after window start")

        def clamp(rec) -> float:
            return overlap_minutes(rec.start, rec.end, window_start, window_end)

        attendance = 0.0
        days = set()
        for p in intervals.presence:
            if p.employee_id != employee_id:
                continue
            minutes = clamp(p)
            if minutes > 0:
                attendance += minutes
                days.add(max(p.start, window_start).date())

        breaks = billable = internal = 0.0
        for a in intervals.activity:
            if a.employee_id != employee_id:
                continue
            minutes = clamp(a)
            if a.kind == ActivityKind.BREAK:
                breaks += minutes
            elif a.billable:
                billable += minutes
            else:
                internal += minutes

        work = max(0.0, attendance - breaks)
        return DerivedMetrics(
            employee_id=employee_id,
            window_start=window_start,
            window_end=window_end,
            total_attendance_minutes=attendance,
            total_break_minutes=breaks,
            calculated_work_minutes=work,
            billable_minutes=billable,
            internal_minutes=internal,
            total_work_minutes=billable + internal,
            attendance_efficiency=_ratio(work, attendance),
            work_productivity=_ratio(billable, work),
            attendance_days=len(days),
            avg_attendance_per_day=attendance / len(days) if days else 0.0,
        )
