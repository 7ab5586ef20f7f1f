from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

INTERNAL_URL = "internal"


@dataclass(frozen=True, slots=True)
class WebhookSubscription:
    id: int
    channel_id: int
    url: str
    secret_token: str
    created_at: datetime

    @property
    def is_internal(self) -> bool:
        """Inbound-only subscriptions never receive outbound dispatch."""
        return self.url == INTERNAL_URL
