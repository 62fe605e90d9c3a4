from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import ActivityState, PresenceState
from ..intervals.model import ActivityInterval, PresenceInterval


@dataclass(frozen=True)
class EmployeeStatus:
    """Read-model: trạng thái hiện tại của nhân viên (ca có mặt + hoạt động đang mở)."""

    employee_id: int
    presence_state: PresenceState
    activity_state: ActivityState
    presence: Optional[PresenceInterval] = None
    activity: Optional[ActivityInterval] = None


@dataclass(frozen=True)
class EmployeeTimeline:
    """Lịch sử trong một khoảng thời gian: các ca có mặt, lần nghỉ và phiên làm việc.

    Open intervals starting before ``window_end`` are included with ``end=None``.
    """

    employee_id: int
    window_start: datetime
    window_end: datetime
    presence: list[PresenceInterval] = field(default_factory=list)
    activity: list[ActivityInterval] = field(default_factory=list)
