from __future__ import annotations

from typing import Any, Protocol, Sequence

from teamchat.domain.entities.webhook import WebhookSubscription


class OutboundWebhookDispatcher(Protocol):
    def dispatch(
        self, hooks: Sequence[WebhookSubscription], payload: dict[str, Any]
    ) -> None:
        """Schedule delivery and return immediately."""
        ...
