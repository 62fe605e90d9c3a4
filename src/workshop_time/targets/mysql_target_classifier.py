from __future__ import annotations

from ..core.constants import ACTIVE_ORDER_STATUSES
from ..core.exceptions import UnknownTargetError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, store_errors
from ..intervals.model import ActivityTarget, CategoryTarget, OrderTarget
from .repository import TargetClassifier


class MySQLTargetClassifier(TargetClassifier):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def is_billable(self, target: ActivityTarget) -> bool:
        if isinstance(target, OrderTarget):
            placeholders = ",".join(["%s"] * len(ACTIVE_ORDER_STATUSES))
            with store_errors(), db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"SELECT order_id FROM work_orders WHERE order_id=%s AND status IN ({placeholders})",
                    (int(target.order_id), *ACTIVE_ORDER_STATUSES),
                )
                row = fetchone(cur)
            if not row:
                raise UnknownTargetError(f"Work order {target.order_id} not found or not active")
            return True

        if isinstance(target, CategoryTarget):
            with store_errors(), db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT is_billable
                    FROM categories
                    WHERE category_id=%s AND type <> 'break' AND is_active=1
                    """,
                    (int(target.category_id),),
                )
                row = fetchone(cur)
            if not row:
                raise UnknownTargetError(f"Invalid activity category {target.category_id}")
            return bool(row["is_billable"])

        raise UnknownTargetError(f"Unsupported target {target!r}")

    def is_break_category(self, category_id: int) -> bool:
        with store_errors(), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT category_id FROM categories WHERE category_id=%s AND type='break' AND is_active=1",
                (int(category_id),),
            )
            return fetchone(cur) is not None
