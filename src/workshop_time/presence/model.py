from __future__ import annotations

from dataclasses import dataclass

from ..intervals.model import PresenceInterval


@dataclass(frozen=True)
class ClockOutOutcome:
    interval: PresenceInterval
    duration_minutes: int
