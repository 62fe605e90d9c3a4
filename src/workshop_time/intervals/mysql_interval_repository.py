from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..core.enums import ActivityKind, ClockMethod
from ..core.exceptions import OpenIntervalConflict, StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, store_errors
from .model import ActivityInterval, ActivityTarget, CategoryTarget, ClosedIntervals, OpenIntervals, OrderTarget, PresenceInterval
from .repository import IntervalStore

_PRESENCE_COLUMNS = "interval_id, employee_id, start_time, end_time, location, note, method"
_ACTIVITY_COLUMNS = (
    "interval_id, employee_id, kind, order_id, category_id, start_time, end_time, note, billable, method"
)


def _presence_from_row(r: dict[str, Any]) -> PresenceInterval:
    return PresenceInterval(
        interval_id=int(r["interval_id"]),
        employee_id=int(r["employee_id"]),
        start=r["start_time"],
        end=r.get("end_time"),
        location=r.get("location"),
        note=r.get("note"),
        method=ClockMethod(r.get("method") or ClockMethod.MANUAL.value),
    )


def _activity_from_row(r: dict[str, Any]) -> ActivityInterval:
    if r.get("order_id") is not None:
        target: ActivityTarget = OrderTarget(int(r["order_id"]))
    else:
        target = CategoryTarget(int(r["category_id"]))
    return ActivityInterval(
        interval_id=int(r["interval_id"]),
        employee_id=int(r["employee_id"]),
        kind=ActivityKind(r["kind"]),
        target=target,
        start=r["start_time"],
        end=r.get("end_time"),
        note=r.get("note"),
        billable=bool(r.get("billable")),
        method=ClockMethod(r.get("method") or ClockMethod.MANUAL.value),
    )


class MySQLIntervalStore(IntervalStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def open_presence(self, employee_id: int) -> Optional[PresenceInterval]:
        with store_errors(), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PRESENCE_COLUMNS}
                FROM presence_intervals
                WHERE employee_id=%s AND end_time IS NULL
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _presence_from_row(r) if r else None

    def append_presence(
        self,
        employee_id: int,
        start: datetime,
        *,
        location: Optional[str] = None,
        note: Optional[str] = None,
        method: ClockMethod = ClockMethod.MANUAL,
    ) -> PresenceInterval:
        with store_errors(), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO presence_intervals(employee_id, start_time, location, note, method)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(employee_id), start, location, note, ClockMethod(method).value),
            )
            interval_id = int(cur.lastrowid)
        return PresenceInterval(
            interval_id=interval_id,
            employee_id=int(employee_id),
            start=start,
            location=location,
            note=note,
            method=ClockMethod(method),
        )

    def close_presence(
        self,
        interval_id: int,
        end: datetime,
        *,
        location: Optional[str] = None,
        note: Optional[str] = None,
    ) -> PresenceInterval:
        with store_errors(), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE presence_intervals
                SET end_time=%s, location=COALESCE(%s, location), note=COALESCE(%s, note)
                WHERE interval_id=%s AND end_time IS NULL
                """,
                (end, location, note, int(interval_id)),
            )
            if cur.rowcount == 0:
                raise OpenIntervalConflict(f"Presence {interval_id} is not open")
            cur.execute(
                f"SELECT {_PRESENCE_COLUMNS} FROM presence_intervals WHERE interval_id=%s",
                (int(interval_id),),
            )
            r = fetchone(cur)
        if not r:
            raise StoreError(f"Presence {interval_id} vanished after close")
        return _presence_from_row(r)

    def open_activity(self, employee_id: int) -> Optional[ActivityInterval]:
        with store_errors(), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ACTIVITY_COLUMNS}
                FROM activity_intervals
                WHERE employee_id=%s AND end_time IS NULL
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _activity_from_row(r) if r else None

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
        order_id = target.order_id if isinstance(target, OrderTarget) else None
        category_id = target.category_id if isinstance(target, CategoryTarget) else None
        with store_errors(), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO activity_intervals(employee_id, kind, order_id, category_id, start_time, note, billable, method)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    ActivityKind(kind).value,
                    order_id,
                    category_id,
                    start,
                    note,
                    1 if billable else 0,
                    ClockMethod(method).value,
                ),
            )
            interval_id = int(cur.lastrowid)
        return ActivityInterval(
            interval_id=interval_id,
            employee_id=int(employee_id),
            kind=ActivityKind(kind),
            target=target,
            start=start,
            note=note,
            billable=bool(billable),
            method=ClockMethod(method),
        )

    def close_activity(self, interval_id: int, end: datetime, *, note: Optional[str] = None) -> ActivityInterval:
        with store_errors(), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE activity_intervals
                SET end_time=%s, note=COALESCE(%s, note)
                WHERE interval_id=%s AND end_time IS NULL
                """,
                (end, note, int(interval_id)),
            )
            if cur.rowcount == 0:
                raise OpenIntervalConflict(f"Activity {interval_id} is not open")
            cur.execute(
                f"SELECT {_ACTIVITY_COLUMNS} FROM activity_intervals WHERE interval_id=%s",
                (int(interval_id),),
            )
            r = fetchone(cur)
        if not r:
            raise StoreError(f"Activity {interval_id} vanished after close")
        return _activity_from_row(r)

    def closed_intervals(self, employee_id: int, window_start: datetime, window_end: datetime) -> ClosedIntervals:
        params = (int(employee_id), window_end, window_start)
        with store_errors(), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PRESENCE_COLUMNS}
                FROM presence_intervals
                WHERE employee_id=%s AND end_time IS NOT NULL AND start_time < %s AND end_time > %s
                ORDER BY start_time ASC, interval_id ASC
                """,
                params,
            )
            presence = [_presence_from_row(r) for r in fetchall(cur)]
            cur.execute(
                f"""
                SELECT {_ACTIVITY_COLUMNS}
                FROM activity_intervals
                WHERE employee_id=%s AND end_time IS NOT NULL AND start_time < %s AND end_time > %s
                ORDER BY start_time ASC, interval_id ASC
                """,
                params,
            )
            activity = [_activity_from_row(r) for r in fetchall(cur)]
        return ClosedIntervals(presence=presence, activity=activity)

    def open_intervals(self) -> OpenIntervals:
        with store_errors(), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PRESENCE_COLUMNS}
                FROM presence_intervals
                WHERE end_time IS NULL
                ORDER BY employee_id ASC
                """
            )
            presence = [_presence_from_row(r) for r in fetchall(cur)]
            cur.execute(
                f"""
                SELECT {_ACTIVITY_COLUMNS}
                FROM activity_intervals
                WHERE end_time IS NULL
                ORDER BY employee_id ASC
                """
            )
            activity = [_activity_from_row(r) for r in fetchall(cur)]
        return OpenIntervals(presence=presence, activity=activity)
