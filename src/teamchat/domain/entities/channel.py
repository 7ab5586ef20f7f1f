from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Channel:
    id: int
    name: str
    owner_id: str | None
    is_active: bool
    icon_codepoint: int | None
    icon_color: str | None
    created_at: datetime
    updated_at: datetime
