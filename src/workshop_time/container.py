from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .common.datetime_utils import now_local
from .core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS
from .database.connection import DatabaseConnection, DBConfig
from .directory.mysql_employee_directory import MySQLEmployeeDirectory
from .directory.repository import EmployeeDirectory
from .directory.static_directory import StaticEmployeeDirectory
from .engine.locks import EmployeeLockRegistry
from .engine.service import TimeActivityEngine
from .intervals.memory_repository import InMemoryIntervalStore
from .intervals.mysql_interval_repository import MySQLIntervalStore
from .intervals.repository import IntervalStore
from .targets.mysql_target_classifier import MySQLTargetClassifier
from .targets.repository import TargetClassifier
from .targets.static_classifier import StaticTargetClassifier


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    interval_store: IntervalStore
    target_classifier: TargetClassifier
    employee_directory: EmployeeDirectory
    locks: EmployeeLockRegistry

    engine: TimeActivityEngine


def build_container(
    *,
    db_config: Optional[dict] = None,
    store_backend: str = "mysql",
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS,
    memory_targets: Optional[dict] = None,
    memory_credentials: Optional[dict] = None,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    if store_backend == "memory":
        conn = None
        interval_store: IntervalStore = InMemoryIntervalStore()
        target_classifier: TargetClassifier = StaticTargetClassifier.from_settings(memory_targets or {})
        employee_directory: EmployeeDirectory = StaticEmployeeDirectory.from_settings(memory_credentials or {})
    elif store_backend == "mysql":
        if not db_config:
            raise ValueError("db_config is required for the mysql backend")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        interval_store = MySQLIntervalStore(conn)
        target_classifier = MySQLTargetClassifier(conn)
        employee_directory = MySQLEmployeeDirectory(conn)
    else:
        raise ValueError(f"Unknown store backend: {store_backend!r}")

    locks = EmployeeLockRegistry(timeout=lock_timeout)
    engine = TimeActivityEngine(interval_store, target_classifier, locks=locks, clock=clock)

    return Container(
        conn=conn,
        interval_store=interval_store,
        target_classifier=target_classifier,
        employee_directory=employee_directory,
        locks=locks,
        engine=engine,
    )
