"""Randomized operation sequences must never break the timeline invariants."""

import random
from datetime import datetime, timedelta

import pytest

from workshop_time.engine.service import TimeActivityEngine
from workshop_time.intervals.memory_repository import InMemoryIntervalStore
from workshop_time.intervals.model import CategoryTarget, OrderTarget
from workshop_time.targets.static_classifier import StaticTargetClassifier

START = datetime(2024, 3, 4, 6, 0)


def _random_call(engine: TimeActivityEngine, rng: random.Random, employee_id: int, ts: datetime):
    op = rng.choice(["clock_in", "clock_out", "start_break", "stop_break", "start_work", "stop_work"])
    if op == "start_break":
        return engine.start_break(employee_id, rng.choice([1, 3]), timestamp=ts)
    if op == "start_work":
        target = rng.choice([OrderTarget(1), OrderTarget(2), CategoryTarget(3)])
        return engine.start_work(employee_id, target, timestamp=ts)
    return getattr(engine, op)(employee_id, timestamp=ts)


def _assert_timeline_ok(presence, activity):
    assert sum(1 for p in presence if p.end is None) <= 1
    assert sum(1 for a in activity if a.end is None) <= 1

    closed_p = sorted((p for p in presence), key=lambda p: p.start)
    for prev, nxt in zip(closed_p, closed_p[1:]):
        assert prev.end is not None and prev.end <= nxt.start

    ordered_a = sorted(activity, key=lambda a: a.start)
    for prev, nxt in zip(ordered_a, ordered_a[1:]):
        assert prev.end is not None and prev.end <= nxt.start

    for a in activity:
        assert a.end is None or a.start <= a.end
        assert any(
            p.start <= a.start and (p.end is None or (a.end is not None and a.end <= p.end)) for p in presence
        ), f"activity {a.interval_id} is not nested in a presence"


@pytest.mark.parametrize("seed", range(20))
def test_random_sequences_keep_invariants(seed):
    rng = random.Random(seed)
    store = InMemoryIntervalStore()
    classifier = StaticTargetClassifier(active_orders={1}, activity_categories={3: False}, break_categories={1})
    engine = TimeActivityEngine(store, classifier)

    ts = START
    for _ in range(200):
        # mostly forward in time, sometimes backwards to probe the ordering checks
        ts += timedelta(minutes=rng.randint(-20, 45))
        employee_id = rng.choice([1, 2])
        before = store.all_intervals(employee_id)

        result = _random_call(engine, rng, employee_id, ts)

        if not result.ok:
            assert store.all_intervals(employee_id) == before
        for e in (1, 2):
            _assert_timeline_ok(*store.all_intervals(e))

        if not result.ok:
            assert result.error_kind is not None
            assert result.message
