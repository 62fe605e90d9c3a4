from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class DerivedMetrics:
    """Read-model: chỉ số hiệu suất của một nhân viên trong một khoảng thời gian.

    Minutes are exact (seconds / 60); percentages are rounded to 2 decimals.
    """

    employee_id: int
    window_start: datetime
    window_end: datetime
    total_attendance_minutes: float = 0.0
    total_break_minutes: float = 0.0
    calculated_work_minutes: float = 0.0
    billable_minutes: float = 0.0
    internal_minutes: float = 0.0
    total_work_minutes: float = 0.0
    attendance_efficiency: float = 0.0
    work_productivity: float = 0.0
    attendance_days: int = 0
    avg_attendance_per_day: float = 0.0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["window_start"] = self.window_start.isoformat()
        data["window_end"] = self.window_end.isoformat()
        return data


@dataclass(frozen=True)
class RankingEntry:
    rank: int
    employee_id: int
    metrics: DerivedMetrics


@dataclass(frozen=True)
class TeamRanking:
    entries: list[RankingEntry] = field(default_factory=list)

    @property
    def team_average(self) -> float:
        """Mean attendance efficiency across the team (0 for an empty team)."""
        if not self.entries:
            return 0.0
        return sum(e.metrics.attendance_efficiency for e in self.entries) / len(self.entries)

    def rank_of(self, employee_id: int) -> Optional[int]:
        for e in self.entries:
            if e.employee_id == employee_id:
                return e.rank
        return None
