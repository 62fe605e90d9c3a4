from __future__ import annotations

from dataclasses import dataclass, field

from ..core.enums import IdentifierKind
from ..core.exceptions import NotFoundError
from .repository import EmployeeDirectory


@dataclass
class StaticEmployeeDirectory(EmployeeDirectory):
    credentials: dict[tuple[IdentifierKind, str], int] = field(default_factory=dict)

    def resolve(self, identifier_kind: IdentifierKind, identifier_value: str) -> int:
        key = (IdentifierKind(identifier_kind), (identifier_value or "").strip())
        if key not in self.credentials:
            raise NotFoundError(f"No active employee for {key[0].value}")
        return self.credentials[key]

    @classmethod
    def from_settings(cls, settings: dict) -> "StaticEmployeeDirectory":
        credentials = {}
        for kind, mapping in dict(settings).items():
            for value, employee_id in dict(mapping).items():
                credentials[(IdentifierKind(kind), str(value))] = int(employee_id)
        return cls(credentials)
