from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from ...intervals.model import ClosedIntervals
from ..model import DerivedMetrics


class ProductivityCalculator(ABC):
    """Calculator interface (Strategy Pattern for productivity metrics)."""

    @abstractmethod
    def window_metrics(
        self,
        employee_id: int,
        intervals: ClosedIntervals,
        window_start: datetime,
        window_end: datetime,
    ) -> DerivedMetrics:
        raise NotImplementedError
