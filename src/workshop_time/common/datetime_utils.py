from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..core.constants import PERCENT_DECIMALS
from ..core.enums import Period
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def rounded_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two instants, nearest minute with ties rounded up."""
    seconds = (end - start).total_seconds()
    return int((seconds + 30) // 60)


def overlap_minutes(
    start: datetime,
    end: Optional[datetime],
    window_start: datetime,
    window_end: datetime,
) -> float:
    """Minutes of ``[start, end)`` falling inside ``[window_start, window_end)``.

    Open intervals (``end is None``) contribute nothing.
    """
    if end is None:
        return 0.0
    lo = max(start, window_start)
    hi = min(end, window_end)
    return max(0.0, (hi - lo).total_seconds() / 60)


def round_percent(value: float) -> float:
    quantum = Decimal(1).scaleb(-PERCENT_DECIMALS)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def day_bounds(start: date, end: date) -> tuple[datetime, datetime]:
    """Inclusive date range -> half-open datetime window."""
    if end < start:
        raise ValidationError("End date must not be before start date")
    return datetime.combine(start, time.min), datetime.combine(end + timedelta(days=1), time.min)


def resolve_period(period: Period | str, today: date) -> tuple[datetime, datetime]:
    """Window for a dashboard period ending with ``today`` (inclusive).

    Weeks start on Sunday, like the kiosk and cockpit dashboards.
    """
    try:
        period = Period(period)
    except ValueError:
        raise ValidationError(f"Unknown period: {period!r}")

    if period == Period.TODAY:
        return day_bounds(today, today)
    if period == Period.WEEK:
        # date.weekday(): Monday=0 .. Sunday=6
        week_start = today - timedelta(days=(today.weekday() + 1) % 7)
        return day_bounds(week_start, today)
    return day_bounds(today.replace(day=1), today)


def require_same_awareness(value: datetime, reference: datetime, field_name: str = "timestamp") -> datetime:
    """Naive and timezone-aware instants cannot be ordered against each other."""
    if (value.utcoffset() is None) != (reference.utcoffset() is None):
        expected = "naive" if reference.utcoffset() is None else "timezone-aware"
        raise ValidationError(f"{field_name} must be {expected}")
    return value
