from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import rounded_minutes
from ..core.enums import ActivityKind, ActivityState, ClockMethod
from ..core.exceptions import (
    AlreadyOnBreakError,
    AlreadyWorkingError,
    InvalidIntervalError,
    NoActiveBreakError,
    NoActiveWorkError,
    NotPresentError,
    OpenIntervalConflict,
    UnknownTargetError,
    ValidationError,
)
from ..intervals.model import ActivityInterval, ActivityTarget, CategoryTarget, OrderTarget, PresenceInterval
from ..intervals.repository import IntervalStore
from ..intervals.timeline import latest_activity_end
from ..targets.repository import TargetClassifier
from .model import BreakOutcome, WorkOutcome

logger = logging.getLogger(__name__)


class ActivityTracker:
    """Break / work-session state machine nested inside an open presence.

    Idle <-> OnBreak and Idle <-> Working; OnBreak and Working never coexist.
    """

    def __init__(self, store: IntervalStore, classifier: TargetClassifier):
        self._store = store
        self._classifier = classifier

    def state(self, employee_id: int) -> ActivityState:
        return self._state_of(self._store.open_activity(employee_id))

    @staticmethod
    def _state_of(activity: Optional[ActivityInterval]) -> ActivityState:
        if activity is None:
            return ActivityState.IDLE
        if activity.kind == ActivityKind.BREAK:
            return ActivityState.ON_BREAK
        return ActivityState.WORKING

    def start_break(
        self,
        employee_id: int,
        category_id: int,
        timestamp: datetime,
        *,
        note: Optional[str] = None,
        method: ClockMethod = ClockMethod.MANUAL,
    ) -> ActivityInterval:
        presence = self._require_presence(employee_id)
        self._require_idle(employee_id)

        if not self._classifier.is_break_category(category_id):
            raise UnknownTargetError(f"Invalid break category {category_id}")
        self._check_start(employee_id, presence, timestamp)

        rec = self._append(
            employee_id,
            ActivityKind.BREAK,
            CategoryTarget(int(category_id)),
            timestamp,
            note=note,
            billable=False,
            method=method,
        )
        logger.info("Break started: employee=%s interval=%s category=%s", employee_id, rec.interval_id, category_id)
        return rec

    def stop_break(self, employee_id: int, timestamp: datetime, *, note: Optional[str] = None) -> BreakOutcome:
        current = self._store.open_activity(employee_id)
        if current is None or current.kind != ActivityKind.BREAK:
            raise NoActiveBreakError()

        closed = self._close(current, timestamp, note=note, missing=NoActiveBreakError)
        minutes = rounded_minutes(closed.start, closed.end)
        logger.info("Break ended: employee=%s interval=%s minutes=%s", employee_id, closed.interval_id, minutes)
        return BreakOutcome(interval=closed, duration_minutes=minutes)

    def start_work(
        self,
        employee_id: int,
        target: ActivityTarget,
        timestamp: datetime,
        *,
        task_description: Optional[str] = None,
        method: ClockMethod = ClockMethod.MANUAL,
    ) -> ActivityInterval:
        if not isinstance(target, (OrderTarget, CategoryTarget)):
            raise ValidationError("Work target must be an order or a category")

        presence = self._require_presence(employee_id)
        self._require_idle(employee_id)

        billable = self._classifier.is_billable(target)
        self._check_start(employee_id, presence, timestamp)

        rec = self._append(
            employee_id,
            ActivityKind.WORK,
            target,
            timestamp,
            note=task_description,
            billable=billable,
            method=method,
        )
        logger.info(
            "Work session started: employee=%s interval=%s target=%s billable=%s",
            employee_id,
            rec.interval_id,
            target,
            billable,
        )
        return rec

    def stop_work(self, employee_id: int, timestamp: datetime, *, note: Optional[str] = None) -> WorkOutcome:
        current = self._store.open_activity(employee_id)
        if current is None or current.kind != ActivityKind.WORK:
            raise NoActiveWorkError()

        closed = self._close(current, timestamp, note=note, missing=NoActiveWorkError)
        minutes = rounded_minutes(closed.start, closed.end)
        logger.info("Work session ended: employee=%s interval=%s minutes=%s", employee_id, closed.interval_id, minutes)
        return WorkOutcome(interval=closed, duration_minutes=minutes, target=closed.target, billable=closed.billable)

    def _require_presence(self, employee_id: int) -> PresenceInterval:
        presence = self._store.open_presence(employee_id)
        if presence is None:
            raise NotPresentError()
        return presence

    def _require_idle(self, employee_id: int) -> None:
        state = self.state(employee_id)
        if state == ActivityState.ON_BREAK:
            raise AlreadyOnBreakError()
        if state == ActivityState.WORKING:
            raise AlreadyWorkingError()

    def _check_start(self, employee_id: int, presence: PresenceInterval, timestamp: datetime) -> None:
        if timestamp < presence.start:
            raise InvalidIntervalError("Start time is before clock-in time")
        previous_end = latest_activity_end(self._store, employee_id, presence.start)
        if previous_end is not None and timestamp < previous_end:
            raise InvalidIntervalError("Start time is before the end of the previous break or work session")

    def _append(self, employee_id: int, kind: ActivityKind, target: ActivityTarget, timestamp: datetime, **kwargs):
        try:
            return self._store.append_activity(employee_id, kind, target, timestamp, **kwargs)
        except OpenIntervalConflict:
            # Lost a race against another writer: report what is open now.
            self._require_presence(employee_id)
            self._require_idle(employee_id)
            raise (AlreadyOnBreakError if kind == ActivityKind.BREAK else AlreadyWorkingError)() from None

    def _close(self, current: ActivityInterval, timestamp: datetime, *, note: Optional[str], missing) -> ActivityInterval:
        if timestamp < current.start:
            raise InvalidIntervalError("End time is before start time")
        try:
            return self._store.close_activity(current.interval_id, timestamp, note=note)
        except OpenIntervalConflict:
            raise missing() from None
