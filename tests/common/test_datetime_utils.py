from datetime import date, datetime

import pytest

from workshop_time.common.datetime_utils import (
    day_bounds,
    overlap_minutes,
    parse_iso_date,
    resolve_period,
    round_percent,
    rounded_minutes,
)
from workshop_time.core.exceptions import ValidationError


def test_rounded_minutes_rounds_half_up():
    start = datetime(2024, 3, 4, 8, 0, 0)
    assert rounded_minutes(start, datetime(2024, 3, 4, 8, 0, 29)) == 0
    assert rounded_minutes(start, datetime(2024, 3, 4, 8, 0, 30)) == 1
    assert rounded_minutes(start, datetime(2024, 3, 4, 8, 1, 29)) == 1


def test_round_percent_half_up():
    assert round_percent(46.666666) == 46.67
    assert round_percent(12.345) == 12.35
    assert round_percent(93.75) == 93.75


def test_overlap_minutes_ignores_open_intervals():
    ws, we = datetime(2024, 3, 4, 10), datetime(2024, 3, 4, 12)
    assert overlap_minutes(datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 11), ws, we) == 60
    assert overlap_minutes(datetime(2024, 3, 4, 9), None, ws, we) == 0
    assert overlap_minutes(datetime(2024, 3, 4, 13), datetime(2024, 3, 4, 14), ws, we) == 0


def test_resolve_period_week_starts_on_sunday():
    # 2024-03-06 is a Wednesday
    assert resolve_period("week", date(2024, 3, 6)) == (datetime(2024, 3, 3), datetime(2024, 3, 7))
    # a Sunday is the first day of its own week
    assert resolve_period("week", date(2024, 3, 3)) == (datetime(2024, 3, 3), datetime(2024, 3, 4))


def test_resolve_period_today_and_month():
    assert resolve_period("today", date(2024, 3, 6)) == (datetime(2024, 3, 6), datetime(2024, 3, 7))
    assert resolve_period("month", date(2024, 3, 6)) == (datetime(2024, 3, 1), datetime(2024, 3, 7))


def test_invalid_inputs_raise_validation_error():
    with pytest.raises(ValidationError):
        resolve_period("year", date(2024, 3, 6))
    with pytest.raises(ValidationError):
        parse_iso_date("06/03/2024")
    with pytest.raises(ValidationError):
        day_bounds(date(2024, 3, 6), date(2024, 3, 5))
