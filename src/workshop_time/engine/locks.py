from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from ..core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS
from ..core.exceptions import BusyError


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class EmployeeLockRegistry:
    """One mutex per employee, created on demand and dropped when unused.

    The registry lock only guards the bookkeeping dict, so employees never wait
    on each other.
    """

    def __init__(self, timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS):
        self._timeout = float(timeout)
        self._guard = threading.Lock()
        self._entries: dict[int, _Entry] = {}

    @contextmanager
    def hold(self, employee_id: int, *, timeout: float | None = None) -> Iterator[None]:
        timeout = self._timeout if timeout is None else float(timeout)
        with self._guard:
            entry = self._entries.get(employee_id)
            if entry is None:
                entry = self._entries[employee_id] = _Entry()
            entry.users += 1

        acquired = False
        try:
            acquired = entry.lock.acquire(timeout=timeout)
            if not acquired:
                raise BusyError(f"Another request for employee {employee_id} is still running, try again")
            yield
        finally:
            if acquired:
                entry.lock.release()
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    self._entries.pop(employee_id, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)
