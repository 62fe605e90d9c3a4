from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import rounded_minutes
from ..core.enums import ClockMethod, PresenceState
from ..core.exceptions import (
    ActiveSubActivityError,
    AlreadyPresentError,
    InvalidIntervalError,
    NotPresentError,
    OpenIntervalConflict,
)
from ..intervals.model import PresenceInterval
from ..intervals.repository import IntervalStore
from ..intervals.timeline import latest_activity_end, latest_presence_end
from .model import ClockOutOutcome

logger = logging.getLogger(__name__)


class PresenceTracker:
    """Clock-in / clock-out state machine: Absent -> Present <-> PresentActive.

    Holds no state of its own; every call re-reads the store. Callers are
    expected to serialize calls per employee.
    """

    def __init__(self, store: IntervalStore):
        self._store = store

    def state(self, employee_id: int) -> PresenceState:
        if self._store.open_presence(employee_id) is None:
            return PresenceState.ABSENT
        if self._store.open_activity(employee_id) is None:
            return PresenceState.PRESENT
        return PresenceState.PRESENT_ACTIVE

    def clock_in(
        self,
        employee_id: int,
        timestamp: datetime,
        *,
        location: Optional[str] = None,
        note: Optional[str] = None,
        method: ClockMethod = ClockMethod.MANUAL,
    ) -> PresenceInterval:
        if self._store.open_presence(employee_id) is not None:
            raise AlreadyPresentError()

        previous_end = latest_presence_end(self._store, employee_id, timestamp)
        if previous_end is not None and timestamp < previous_end:
            raise InvalidIntervalError(f"Clock-in overlaps the previous attendance ending {previous_end:%Y-%m-%d %H:%M}")

        try:
            rec = self._store.append_presence(employee_id, timestamp, location=location, note=note, method=method)
        except OpenIntervalConflict:
            # Another writer clocked the employee in between our read and write.
            raise AlreadyPresentError() from None

        logger.info("Clocked in: employee=%s interval=%s method=%s", employee_id, rec.interval_id, rec.method.value)
        return rec

    def clock_out(
        self,
        employee_id: int,
        timestamp: datetime,
        *,
        location: Optional[str] = None,
        note: Optional[str] = None,
    ) -> ClockOutOutcome:
        presence = self._store.open_presence(employee_id)
        if presence is None:
            raise NotPresentError()

        if self._store.open_activity(employee_id) is not None:
            raise ActiveSubActivityError()

        if timestamp < presence.start:
            raise InvalidIntervalError("Clock-out time is before clock-in time")

        activity_end = latest_activity_end(self._store, employee_id, presence.start)
        if activity_end is not None and timestamp < activity_end:
            raise InvalidIntervalError("Clock-out time is before the end of the last break or work session")

        try:
            closed = self._store.close_presence(presence.interval_id, timestamp, location=location, note=note)
        except OpenIntervalConflict:
            raise NotPresentError() from None

        minutes = rounded_minutes(closed.start, closed.end)
        logger.info("Clocked out: employee=%s interval=%s minutes=%s", employee_id, closed.interval_id, minutes)
        return ClockOutOutcome(interval=closed, duration_minutes=minutes)
