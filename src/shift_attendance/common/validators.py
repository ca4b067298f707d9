from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_int(value, field_name: str, *, min_value: int | None = None, max_value: int | None = None) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer") from None
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    if min_value is not None and number < min_value:
        raise ValidationError(f"{field_name} must be >= {min_value}")
    if max_value is not None and number > max_value:
        raise ValidationError(f"{field_name} must be <= {max_value}")
    return number


def clean_notes(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("notes must be a string")
    value = value.strip()
    return value or None
