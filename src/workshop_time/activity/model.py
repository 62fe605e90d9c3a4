from __future__ import annotations

from dataclasses import dataclass

from ..intervals.model import ActivityInterval, ActivityTarget


@dataclass(frozen=True)
class BreakOutcome:
    interval: ActivityInterval
    duration_minutes: int


@dataclass(frozen=True)
class WorkOutcome:
    """Summary shown after stopping work (order/category and billability)."""

    interval: ActivityInterval
    duration_minutes: int
    target: ActivityTarget
    billable: bool
