from __future__ import annotations

from typing import Iterable

from .model import DerivedMetrics, RankingEntry, TeamRanking


def ranking_key(m: DerivedMetrics) -> tuple[float, float, int]:
    return (-m.attendance_efficiency, -m.work_productivity, m.employee_id)


def team_ranking(metrics: Iterable[DerivedMetrics]) -> TeamRanking:
    """Sort by attendance efficiency desc, then work productivity desc, then employee id.

    The key is total over distinct employee ids, so the order is deterministic.
    """
    ordered = sorted(metrics, key=ranking_key)
    return TeamRanking(entries=[RankingEntry(rank=i, employee_id=m.employee_id, metrics=m) for i, m in enumerate(ordered, 1)])
