from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_positive_id(value, field_name: str) -> int:
    try:
        ident = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if ident < 1:
        raise ValidationError(f"{field_name} must be positive")
    return ident


def optional_text(value: Optional[str]) -> Optional[str]:
    """Strip free text; blank becomes None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None
