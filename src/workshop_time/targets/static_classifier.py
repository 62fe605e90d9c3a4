from __future__ import annotations

from dataclasses import dataclass, field

from ..core.exceptions import UnknownTargetError
from ..intervals.model import ActivityTarget, CategoryTarget, OrderTarget
from .repository import TargetClassifier


@dataclass
class StaticTargetClassifier(TargetClassifier):
    """Configuration-backed classifier for the memory backend and tests."""

    active_orders: set[int] = field(default_factory=set)
    activity_categories: dict[int, bool] = field(default_factory=dict)
    break_categories: set[int] = field(default_factory=set)

    def is_billable(self, target: ActivityTarget) -> bool:
        if isinstance(target, OrderTarget):
            if target.order_id not in self.active_orders:
                raise UnknownTargetError(f"Work order {target.order_id} not found or not active")
            return True
        if isinstance(target, CategoryTarget):
            if target.category_id not in self.activity_categories:
                raise UnknownTargetError(f"Invalid activity category {target.category_id}")
            return bool(self.activity_categories[target.category_id])
        raise UnknownTargetError(f"Unsupported target {target!r}")

    def is_break_category(self, category_id: int) -> bool:
        return int(category_id) in self.break_categories

    @classmethod
    def from_settings(cls, settings: dict) -> "StaticTargetClassifier":
        return cls(
            active_orders={int(x) for x in settings.get("active_orders", ())},
            activity_categories={int(k): bool(v) for k, v in dict(settings.get("activity_categories", {})).items()},
            break_categories={int(x) for x in settings.get("break_categories", ())},
        )
