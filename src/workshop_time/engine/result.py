from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..core.enums import ErrorKind


@dataclass(frozen=True)
class OperationResult:
    """Uniform engine response: ``{ok: True, state}`` or ``{ok: False, error_kind, message}``."""

    ok: bool
    state: Any = None
    error_kind: Optional[ErrorKind] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, state: Any) -> "OperationResult":
        return cls(ok=True, state=state)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "OperationResult":
        return cls(ok=False, error_kind=kind, message=message)

    def to_dict(self, serialize=lambda v: v) -> dict:
        if self.ok:
            return {"ok": True, "state": serialize(self.state)}
        return {"ok": False, "errorKind": self.error_kind.value, "message": self.message}
