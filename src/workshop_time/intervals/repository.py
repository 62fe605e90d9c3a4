from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..core.enums import ActivityKind, ClockMethod
from .model import ActivityInterval, ActivityTarget, ClosedIntervals, OpenIntervals, PresenceInterval


class IntervalStore(Protocol):
    """Durable presence/activity timeline.

    Implementations must refuse a second open interval per employee and table
    and refuse closing a row that is no longer open, raising
    ``OpenIntervalConflict`` in both cases. IO faults surface as ``StoreError``.
    """

    def open_presence(self, employee_id: int) -> Optional[PresenceInterval]:
        raise NotImplementedError

    def append_presence(
        self,
        employee_id: int,
        start: datetime,
        *,
        location: Optional[str] = None,
        note: Optional[str] = None,
        method: ClockMethod = ClockMethod.MANUAL,
    ) -> PresenceInterval:
        raise NotImplementedError

    def close_presence(
        self,
        interval_id: int,
        end: datetime,
        *,
        location: Optional[str] = None,
        note: Optional[str] = None,
    ) -> PresenceInterval:
        raise NotImplementedError

    def open_activity(self, employee_id: int) -> Optional[ActivityInterval]:
        raise NotImplementedError

    def append_activity(
        self,
        employee_id: int,
        kind: ActivityKind,
        target: ActivityTarget,
        start: datetime,
        *,
        note: Optional[str] = None,
        billable: bool = False,
        method: ClockMethod = ClockMethod.MANUAL,
    ) -> ActivityInterval:
        raise NotImplementedError

    def close_activity(self, interval_id: int, end: datetime, *, note: Optional[str] = None) -> ActivityInterval:
        raise NotImplementedError

    def closed_intervals(self, employee_id: int, window_start: datetime, window_end: datetime) -> ClosedIntervals:
        """Closed intervals with ``start < window_end`` and ``end > window_start``."""

        raise NotImplementedError

    def open_intervals(self) -> OpenIntervals:
        """All open presence and activity rows, ordered by employee id."""

        raise NotImplementedError
