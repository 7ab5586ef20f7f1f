from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class RefreshToken:
    id: int
    user_id: str
    token: str
    expires_at: datetime
    is_revoked: bool
