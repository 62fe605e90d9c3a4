from __future__ import annotations

from typing import Protocol

from ..core.enums import IdentifierKind


class EmployeeDirectory(Protocol):
    def resolve(self, identifier_kind: IdentifierKind, identifier_value: str) -> int:
        """Employee id for a kiosk credential; raises ``NotFoundError``."""

        raise NotImplementedError
