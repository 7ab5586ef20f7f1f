from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class ReadReceipt:
    message_id: int
    user_id: str
    read_at: datetime
