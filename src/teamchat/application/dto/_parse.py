"""Coercion helpers shared by the request DTOs."""
from __future__ import annotations

from typing import Any

from teamchat.application.exceptions import ValidationError


def parse_int(raw: Any, field: str) -> int:
    if isinstance(raw, bool):
        raise ValidationError(f"{field} is invalid")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            pass
    raise ValidationError(f"{field} is invalid")


def clean_str(raw: Any) -> str:
    """Trimmed text or empty string for anything that is not a string."""
    return raw.strip() if isinstance(raw, str) else ""


def optional_str(raw: Any) -> str | None:
    value = clean_str(raw)
    return value or None


def parse_id_list(raw: Any, field: str) -> tuple[str, ...]:
    """Trimmed, de-duplicated string ids in request order; ``None`` means empty."""
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ValidationError(f"{field} must be a list")
    return tuple(dict.fromkeys(clean_str(r) for r in raw if clean_str(r)))
