from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..core.enums import ActivityKind, ClockMethod
from ..core.exceptions import OpenIntervalConflict, StoreError
from .model import ActivityInterval, ActivityTarget, ClosedIntervals, OpenIntervals, PresenceInterval
from .repository import IntervalStore


class InMemoryIntervalStore(IntervalStore):
    """Process-local store for single-node deployments and tests.

    Every method runs under one lock, so the "one open row" checks act as a
    compare-and-swap just like the UNIQUE key of the MySQL schema.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._presence: dict[int, PresenceInterval] = {}
        self._activity: dict[int, ActivityInterval] = {}
        self._next_id = 0

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def open_presence(self, employee_id: int) -> Optional[PresenceInterval]:
        with self._lock:
            return self._find_open(self._presence, employee_id)

    def append_presence(
        self,
        employee_id: int,
        start: datetime,
        *,
        location: Optional[str] = None,
        note: Optional[str] = None,
        method: ClockMethod = ClockMethod.MANUAL,
    ) -> PresenceInterval:
        with self._lock:
            if self._find_open(self._presence, employee_id):
                raise OpenIntervalConflict(f"Open presence exists for employee {employee_id}")
            rec = PresenceInterval(
                interval_id=self._new_id(),
                employee_id=employee_id,
                start=start,
                location=location,
                note=note,
                method=method,
            )
            self._presence[rec.interval_id] = rec
            return rec

    def close_presence(
        self,
        interval_id: int,
        end: datetime,
        *,
        location: Optional[str] = None,
        note: Optional[str] = None,
    ) -> PresenceInterval:
        with self._lock:
            rec = self._get_open(self._presence, interval_id)
            rec = replace(
                rec,
                end=end,
                location=location if location is not None else rec.location,
                note=note if note is not None else rec.note,
            )
            self._presence[interval_id] = rec
            return rec

    def open_activity(self, employee_id: int) -> Optional[ActivityInterval]:
        with self._lock:
            return self._find_open(self._activity, employee_id)

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
        with self._lock:
            if self._find_open(self._activity, employee_id):
                raise OpenIntervalConflict(f"Open activity exists for employee {employee_id}")
            rec = ActivityInterval(
                interval_id=self._new_id(),
                employee_id=employee_id,
                kind=ActivityKind(kind),
                target=target,
                start=start,
                note=note,
                billable=bool(billable),
                method=method,
            )
            self._activity[rec.interval_id] = rec
            return rec

    def close_activity(self, interval_id: int, end: datetime, *, note: Optional[str] = None) -> ActivityInterval:
        with self._lock:
            rec = self._get_open(self._activity, interval_id)
            rec = replace(rec, end=end, note=note if note is not None else rec.note)
            self._activity[interval_id] = rec
            return rec

    def closed_intervals(self, employee_id: int, window_start: datetime, window_end: datetime) -> ClosedIntervals:
        with self._lock:
            presence = [
                r for r in self._presence.values() if self._overlaps(r, employee_id, window_start, window_end)
            ]
            activity = [
                r for r in self._activity.values() if self._overlaps(r, employee_id, window_start, window_end)
            ]
        presence.sort(key=lambda r: (r.start, r.interval_id))
        activity.sort(key=lambda r: (r.start, r.interval_id))
        return ClosedIntervals(presence=presence, activity=activity)

    def open_intervals(self) -> OpenIntervals:
        with self._lock:
            presence = [r for r in self._presence.values() if r.end is None]
            activity = [r for r in self._activity.values() if r.end is None]
        presence.sort(key=lambda r: r.employee_id)
        activity.sort(key=lambda r: r.employee_id)
        return OpenIntervals(presence=presence, activity=activity)

    def all_intervals(self, employee_id: int) -> tuple[list[PresenceInterval], list[ActivityInterval]]:
        """Snapshot of one employee's timeline, open rows included."""
        with self._lock:
            presence = [r for r in self._presence.values() if r.employee_id == employee_id]
            activity = [r for r in self._activity.values() if r.employee_id == employee_id]
        return sorted(presence, key=lambda r: r.interval_id), sorted(activity, key=lambda r: r.interval_id)

    @staticmethod
    def _find_open(rows: dict, employee_id: int):
        for r in rows.values():
            if r.employee_id == employee_id and r.end is None:
                return r
        return None

    @staticmethod
    def _get_open(rows: dict, interval_id: int):
        rec = rows.get(interval_id)
        if rec is None:
            raise StoreError(f"Interval {interval_id} not found")
        if rec.end is not None:
            raise OpenIntervalConflict(f"Interval {interval_id} is already closed")
        return rec

    @staticmethod
    def _overlaps(rec, employee_id: int, window_start: datetime, window_end: datetime) -> bool:
        return (
            rec.employee_id == employee_id
            and rec.end is not None
            and rec.start < window_end
            and rec.end > window_start
        )
