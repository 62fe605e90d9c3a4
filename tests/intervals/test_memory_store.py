from datetime import datetime

import pytest

from workshop_time.core.enums import ActivityKind, ClockMethod
from workshop_time.core.exceptions import OpenIntervalConflict, StoreError
from workshop_time.intervals.memory_repository import InMemoryIntervalStore
from workshop_time.intervals.model import CategoryTarget, OrderTarget
from workshop_time.intervals.timeline import latest_activity_end, latest_presence_end

DAY = datetime(2024, 3, 4)


def at(hour: int, minute: int = 0) -> datetime:
    return DAY.replace(hour=hour, minute=minute)


def test_second_open_presence_is_refused():
    store = InMemoryIntervalStore()
    store.append_presence(1, at(8))

    with pytest.raises(OpenIntervalConflict):
        store.append_presence(1, at(8, 1))

    # other employees are unaffected
    store.append_presence(2, at(8, 1))


def test_closing_twice_is_a_conflict_and_unknown_id_is_a_store_error():
    store = InMemoryIntervalStore()
    rec = store.append_presence(1, at(8), method=ClockMethod.KIOSK)
    closed = store.close_presence(rec.interval_id, at(16), note="done")

    assert closed.end == at(16)
    assert closed.note == "done"
    assert closed.method == ClockMethod.KIOSK
    assert store.open_presence(1) is None

    with pytest.raises(OpenIntervalConflict):
        store.close_presence(rec.interval_id, at(17))
    with pytest.raises(StoreError):
        store.close_presence(999, at(17))


def test_closed_intervals_returns_only_closed_rows_overlapping_window():
    store = InMemoryIntervalStore()
    p = store.append_presence(1, at(8))
    store.close_presence(p.interval_id, at(12))
    a = store.append_activity(1, ActivityKind.WORK, OrderTarget(1), at(8), billable=True)
    store.close_activity(a.interval_id, at(9))
    store.append_presence(1, at(13))  # still open

    inside = store.closed_intervals(1, at(11), at(14))
    assert [r.interval_id for r in inside.presence] == [p.interval_id]
    assert inside.activity == []

    assert store.closed_intervals(1, at(12), at(14)).presence == []
    assert store.closed_intervals(2, at(0), at(23)).presence == []


def test_timeline_helpers_find_latest_closed_end():
    store = InMemoryIntervalStore()
    p = store.append_presence(1, at(8))
    store.close_presence(p.interval_id, at(10))
    a = store.append_activity(1, ActivityKind.BREAK, CategoryTarget(1), at(8, 30))
    store.close_activity(a.interval_id, at(9))

    assert latest_presence_end(store, 1, at(9)) == at(10)
    assert latest_presence_end(store, 1, at(11)) is None
    assert latest_activity_end(store, 1, at(8)) == at(9)
    assert latest_activity_end(store, 2, at(8)) is None


def test_open_intervals_lists_every_employee():
    store = InMemoryIntervalStore()
    store.append_presence(2, at(8))
    p = store.append_presence(1, at(8))
    store.append_activity(2, ActivityKind.WORK, OrderTarget(1), at(9))
    store.close_presence(p.interval_id, at(9))

    current = store.open_intervals()

    assert [r.employee_id for r in current.presence] == [2]
    assert [r.employee_id for r in current.activity] == [2]
