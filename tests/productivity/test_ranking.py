from datetime import datetime

from workshop_time.productivity.model import DerivedMetrics, TeamRanking
from workshop_time.productivity.ranking import team_ranking

WS = datetime(2024, 3, 3)
WE = datetime(2024, 3, 10)


def _m(employee_id: int, eff: float, prod: float) -> DerivedMetrics:
    return DerivedMetrics(
        employee_id=employee_id,
        window_start=WS,
        window_end=WE,
        attendance_efficiency=eff,
        work_productivity=prod,
    )


def test_sorted_by_efficiency_then_productivity_then_id():
    ranking = team_ranking([_m(3, 90.0, 50.0), _m(1, 95.0, 10.0), _m(2, 90.0, 60.0), _m(4, 90.0, 50.0)])

    assert [e.employee_id for e in ranking.entries] == [1, 2, 3, 4]
    assert [e.rank for e in ranking.entries] == [1, 2, 3, 4]
    assert ranking.rank_of(3) == 3
    assert ranking.rank_of(42) is None


def test_ranking_is_independent_of_input_order():
    metrics = [_m(i, 80.0 + (i % 3), 40.0) for i in range(1, 10)]

    forward = [e.employee_id for e in team_ranking(metrics).entries]
    backward = [e.employee_id for e in team_ranking(reversed(metrics)).entries]
    assert forward == backward


def test_team_average():
    ranking = team_ranking([_m(1, 90.0, 0.0), _m(2, 70.0, 0.0)])
    assert ranking.team_average == 80.0
    assert TeamRanking().team_average == 0.0
