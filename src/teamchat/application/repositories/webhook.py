from __future__ import annotations

from typing import Protocol

from teamchat.application.dto.webhook import CreateWebhookDTO
from teamchat.domain.entities.webhook import WebhookSubscription


class WebhookReader(Protocol):
    async def list_for_channel(self, channel_id: int) -> list[WebhookSubscription]: ...

    async def find_by_secret(
        self, channel_id: int, secret: str
    ) -> WebhookSubscription | None: ...


class WebhookWriter(Protocol):
    async def create(self, data: CreateWebhookDTO) -> WebhookSubscription: ...
