from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

from ..core.enums import ActivityKind, ClockMethod
from ..common.validators import require_positive_id
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class OrderTarget:
    """Công việc trên một lệnh sửa chữa (work order)."""

    order_id: int


@dataclass(frozen=True)
class CategoryTarget:
    """Hoạt động tự do hoặc loại nghỉ giải lao theo danh mục."""

    category_id: int


ActivityTarget = Union[OrderTarget, CategoryTarget]


def parse_target(order_id: Optional[int] = None, category_id: Optional[int] = None) -> ActivityTarget:
    """Build a target from a loose payload; exactly one reference must be given."""
    if (order_id is None) == (category_id is None):
        raise ValidationError("Provide exactly one of order_id or category_id")
    if order_id is not None:
        return OrderTarget(require_positive_id(order_id, "order_id"))
    return CategoryTarget(require_positive_id(category_id, "category_id"))


@dataclass(frozen=True)
class PresenceInterval:
    """Thực thể miền (domain): Một ca có mặt từ lúc chấm vào đến lúc chấm ra."""

    interval_id: int
    employee_id: int
    start: datetime
    end: Optional[datetime] = None
    location: Optional[str] = None
    note: Optional[str] = None
    method: ClockMethod = ClockMethod.MANUAL

    @property
    def is_open(self) -> bool:
        return self.end is None


@dataclass(frozen=True)
class ActivityInterval:
    """Thực thể miền (domain): Một lần nghỉ hoặc một phiên làm việc."""

    interval_id: int
    employee_id: int
    kind: ActivityKind
    target: ActivityTarget
    start: datetime
    end: Optional[datetime] = None
    note: Optional[str] = None
    billable: bool = False
    method: ClockMethod = ClockMethod.MANUAL

    @property
    def is_open(self) -> bool:
        return self.end is None


@dataclass(frozen=True)
class ClosedIntervals:
    """Read-model: closed intervals overlapping a report window."""

    presence: list[PresenceInterval] = field(default_factory=list)
    activity: list[ActivityInterval] = field(default_factory=list)


@dataclass(frozen=True)
class OpenIntervals:
    """Read-model: every interval still open, across all employees."""

    presence: list[PresenceInterval] = field(default_factory=list)
    activity: list[ActivityInterval] = field(default_factory=list)
