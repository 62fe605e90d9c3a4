from __future__ import annotations

from typing import Protocol

from ..intervals.model import ActivityTarget


class TargetClassifier(Protocol):
    def is_billable(self, target: ActivityTarget) -> bool:
        """Billability of a work target.

        Raises ``UnknownTargetError`` when the order/category does not exist or
        cannot take work (inactive category, closed order, break category).
        """

        raise NotImplementedError

    def is_break_category(self, category_id: int) -> bool:
        raise NotImplementedError
