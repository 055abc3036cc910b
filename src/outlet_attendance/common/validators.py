from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} cannot be empty")
    return str(value).strip()


def require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a positive number")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a positive number") from None
    if number != value and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a positive number")
    if number <= 0:
        raise ValidationError(f"{field_name} must be a positive number")
    return number


def optional_text(value: Optional[str]) -> Optional[str]:
    text = (value or "").strip()
    return text or None
