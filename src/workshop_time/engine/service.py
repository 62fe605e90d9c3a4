from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Iterable, Optional, TypeVar

from ..activity.tracker import ActivityTracker
from ..common.datetime_utils import now_local, require_same_awareness, resolve_period
from ..core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS, READ_RETRY_ATTEMPTS
from ..core.enums import ActivityKind, ActivityState, ClockMethod, ErrorKind, Period, PresenceState
from ..core.exceptions import DomainError, InfrastructureError, TransitionError, ValidationError
from ..intervals.model import ActivityInterval, ActivityTarget, PresenceInterval
from ..intervals.repository import IntervalStore
from ..presence.tracker import PresenceTracker
from ..productivity.calculator.base import ProductivityCalculator
from ..productivity.calculator.standard_calculator import StandardProductivityCalculator
from ..productivity.model import DerivedMetrics
from ..productivity.ranking import team_ranking
from ..targets.repository import TargetClassifier
from .locks import EmployeeLockRegistry
from .model import EmployeeStatus, EmployeeTimeline
from .result import OperationResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TimeActivityEngine:
    """Façade over presence/activity trackers and the productivity calculator.

    Every public method returns an ``OperationResult``; no exception crosses
    this boundary. Mutations run inside the employee's lock and are never
    retried. Reads are retried once on infrastructure faults.
    """

    def __init__(
        self,
        store: IntervalStore,
        classifier: TargetClassifier,
        *,
        calculator: Optional[ProductivityCalculator] = None,
        locks: Optional[EmployeeLockRegistry] = None,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._store = store
        self._presence = PresenceTracker(store)
        self._activity = ActivityTracker(store, classifier)
        self._calculator = calculator or StandardProductivityCalculator()
        self._locks = locks if locks is not None else EmployeeLockRegistry(timeout=lock_timeout)
        self._clock = clock

    # ---- mutations -------------------------------------------------------

    def clock_in(
        self,
        employee_id: int,
        *,
        timestamp: Optional[datetime] = None,
        location: Optional[str] = None,
        note: Optional[str] = None,
        method: ClockMethod = ClockMethod.MANUAL,
    ) -> OperationResult:
        return self._mutate(
            "clock_in",
            employee_id,
            lambda: self._presence.clock_in(
                employee_id, self._instant(timestamp), location=location, note=note, method=method
            ),
        )

    def clock_out(
        self,
        employee_id: int,
        *,
        timestamp: Optional[datetime] = None,
        location: Optional[str] = None,
        note: Optional[str] = None,
    ) -> OperationResult:
        return self._mutate(
            "clock_out",
            employee_id,
            lambda: self._presence.clock_out(employee_id, self._instant(timestamp), location=location, note=note),
        )

    def start_break(
        self,
        employee_id: int,
        category_id: int,
        *,
        timestamp: Optional[datetime] = None,
        note: Optional[str] = None,
        method: ClockMethod = ClockMethod.MANUAL,
    ) -> OperationResult:
        return self._mutate(
            "start_break",
            employee_id,
            lambda: self._activity.start_break(
                employee_id, category_id, self._instant(timestamp), note=note, method=method
            ),
        )

    def stop_break(
        self,
        employee_id: int,
        *,
        timestamp: Optional[datetime] = None,
        note: Optional[str] = None,
    ) -> OperationResult:
        return self._mutate(
            "stop_break",
            employee_id,
            lambda: self._activity.stop_break(employee_id, self._instant(timestamp), note=note),
        )

    def start_work(
        self,
        employee_id: int,
        target: ActivityTarget,
        *,
        timestamp: Optional[datetime] = None,
        task_description: Optional[str] = None,
        method: ClockMethod = ClockMethod.MANUAL,
    ) -> OperationResult:
        return self._mutate(
            "start_work",
            employee_id,
            lambda: self._activity.start_work(
                employee_id, target, self._instant(timestamp), task_description=task_description, method=method
            ),
        )

    def stop_work(
        self,
        employee_id: int,
        *,
        timestamp: Optional[datetime] = None,
        note: Optional[str] = None,
    ) -> OperationResult:
        return self._mutate(
            "stop_work",
            employee_id,
            lambda: self._activity.stop_work(employee_id, self._instant(timestamp), note=note),
        )

    # ---- reads -----------------------------------------------------------

    def current_status(self, employee_id: int) -> OperationResult:
        def load() -> EmployeeStatus:
            with self._locks.hold(employee_id):
                presence = self._store.open_presence(employee_id)
                activity = self._store.open_activity(employee_id)
            return _status(employee_id, presence, activity)

        return self._read("current_status", load)

    def active_employees(self) -> OperationResult:
        """Live board: status of every employee with an open presence, by employee id."""

        def load() -> list[EmployeeStatus]:
            current = self._store.open_intervals()
            activity_by_employee = {a.employee_id: a for a in current.activity}
            return [
                _status(p.employee_id, p, activity_by_employee.get(p.employee_id))
                for p in sorted(current.presence, key=lambda p: p.employee_id)
            ]

        return self._read("active_employees", load)

    def timeline(self, employee_id: int, window_start: datetime, window_end: datetime) -> OperationResult:
        def load() -> EmployeeTimeline:
            self._check_window(window_start, window_end)
            closed = self._store.closed_intervals(employee_id, window_start, window_end)
            presence = list(closed.presence)
            activity = list(closed.activity)

            open_presence = self._store.open_presence(employee_id)
            if open_presence is not None and open_presence.start < window_end:
                presence.append(open_presence)
            open_activity = self._store.open_activity(employee_id)
            if open_activity is not None and open_activity.start < window_end:
                activity.append(open_activity)

            return EmployeeTimeline(
                employee_id=employee_id,
                window_start=window_start,
                window_end=window_end,
                presence=sorted(presence, key=lambda r: (r.start, r.interval_id)),
                activity=sorted(activity, key=lambda r: (r.start, r.interval_id)),
            )

        return self._read("timeline", load)

    def today(self) -> date:
        """Current date according to the engine clock."""
        return self._clock().date()

    def window_metrics(self, employee_id: int, window_start: datetime, window_end: datetime) -> OperationResult:
        return self._read("window_metrics", lambda: self._metrics(employee_id, window_start, window_end))

    def period_metrics(
        self,
        employee_id: int,
        period: Period | str,
        *,
        today: Optional[date] = None,
    ) -> OperationResult:
        try:
            window_start, window_end = resolve_period(period, today or self.today())
        except ValidationError as e:
            return OperationResult.failure(e.kind, str(e))
        return self.window_metrics(employee_id, window_start, window_end)

    def team_ranking(
        self,
        employee_ids: Iterable[int],
        window_start: datetime,
        window_end: datetime,
    ) -> OperationResult:
        # Duplicate ids would break the total order.
        ids = sorted(set(employee_ids))
        return self._read(
            "team_ranking",
            lambda: team_ranking(self._metrics(i, window_start, window_end) for i in ids),
        )

    # ---- helpers ---------------------------------------------------------

    def _instant(self, timestamp: Optional[datetime]) -> datetime:
        now = self._clock()
        if timestamp is None:
            return now
        return require_same_awareness(timestamp, now)

    def _check_window(self, window_start: datetime, window_end: datetime) -> None:
        now = self._clock()
        require_same_awareness(window_start, now, "window_start")
        require_same_awareness(window_end, now, "window_end")
        if window_end <= window_start:
            raise ValidationError("Window end must be after window start")

    def _metrics(self, employee_id: int, window_start: datetime, window_end: datetime) -> DerivedMetrics:
        self._check_window(window_start, window_end)
        intervals = self._store.closed_intervals(employee_id, window_start, window_end)
        return self._calculator.window_metrics(employee_id, intervals, window_start, window_end)

    def _mutate(self, operation: str, employee_id: int, action: Callable[[], T]) -> OperationResult:
        try:
            with self._locks.hold(employee_id):
                state = action()
        except Exception as e:
            return self._failure(operation, employee_id, e)
        return OperationResult.success(state)

    def _read(self, operation: str, action: Callable[[], T]) -> OperationResult:
        attempts = 1 + READ_RETRY_ATTEMPTS
        for attempt in range(1, attempts + 1):
            try:
                return OperationResult.success(action())
            except InfrastructureError as e:
                if attempt < attempts:
                    logger.warning("%s failed (%s), retrying", operation, e)
                    continue
                return self._failure(operation, None, e)
            except Exception as e:
                return self._failure(operation, None, e)

    @staticmethod
    def _failure(operation: str, employee_id: Optional[int], error: Exception) -> OperationResult:
        if isinstance(error, (TransitionError, ValidationError)):
            logger.info("%s rejected: employee=%s kind=%s", operation, employee_id, error.kind.value)
            return OperationResult.failure(error.kind, str(error))
        if isinstance(error, InfrastructureError):
            logger.warning("%s failed: employee=%s kind=%s: %s", operation, employee_id, error.kind.value, error)
            return OperationResult.failure(error.kind, str(error))
        if isinstance(error, DomainError):
            logger.warning("%s failed: employee=%s: %s", operation, employee_id, error)
        else:
            logger.exception("%s failed unexpectedly: employee=%s", operation, employee_id)
        return OperationResult.failure(ErrorKind.STORE_FAILURE, "Interval store failure")


def _status(
    employee_id: int,
    presence: Optional[PresenceInterval],
    activity: Optional[ActivityInterval],
) -> EmployeeStatus:
    if presence is None:
        presence_state = PresenceState.ABSENT
    elif activity is None:
        presence_state = PresenceState.PRESENT
    else:
        presence_state = PresenceState.PRESENT_ACTIVE

    if activity is None:
        activity_state = ActivityState.IDLE
    elif activity.kind == ActivityKind.BREAK:
        activity_state = ActivityState.ON_BREAK
    else:
        activity_state = ActivityState.WORKING

    return EmployeeStatus(
        employee_id=employee_id,
        presence_state=presence_state,
        activity_state=activity_state,
        presence=presence,
        activity=activity,
    )
