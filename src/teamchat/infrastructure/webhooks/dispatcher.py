"""Outbound webhook delivery over HTTP."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

import httpx

from teamchat.domain.entities.webhook import WebhookSubscription

logger = logging.getLogger(__name__)

SECRET_HEADER = "X-Webhook-Secret"


class HttpWebhookDispatcher:
    """Fire-and-forget POSTs; a failed delivery is logged and dropped."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client
        self._pending: set[asyncio.Task[None]] = set()

    def dispatch(
        self,
        hooks: Sequence[WebhookSubscription],
        payload: dict[str, Any],
    ) -> None:
        for hook in hooks:
            if hook.is_internal or not hook.url:
                continue
            task = asyncio.create_task(self._deliver(hook, payload), name=f"webhook-{hook.id}")
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    async def _deliver(self, hook: WebhookSubscription, payload: dict[str, Any]) -> None:
        try:
            response = await self._client.post(
                hook.url,
                json=payload,
                headers={SECRET_HEADER: hook.secret_token},
            )
        except httpx.HTTPError as exc:
            logger.warning("Webhook %s to %s failed: %s", hook.id, hook.url, exc)
            return
        if response.is_error:
            logger.warning(
                "Webhook %s to %s answered %d", hook.id, hook.url, response.status_code
            )

    async def aclose(self) -> None:
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        await self._client.aclose()
