from __future__ import annotations

from datetime import datetime
from typing import Optional

from .repository import IntervalStore


def far_future(ts: datetime) -> datetime:
    """Upper window bound compatible with ``ts`` (naive or aware)."""
    return datetime.max.replace(microsecond=0, tzinfo=ts.tzinfo)


def latest_presence_end(store: IntervalStore, employee_id: int, since: datetime) -> Optional[datetime]:
    closed = store.closed_intervals(employee_id, since, far_future(since))
    return max((p.end for p in closed.presence), default=None)


def latest_activity_end(store: IntervalStore, employee_id: int, since: datetime) -> Optional[datetime]:
    """End of the last closed break/work session finishing after ``since``."""
    closed = store.closed_intervals(employee_id, since, far_future(since))
    return max((a.end for a in closed.activity), default=None)
