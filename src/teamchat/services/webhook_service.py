from __future__ import annotations

from typing import Any

from teamchat.application.dto.identity import Identity
from teamchat.application.dto.webhook import CreateWebhookDTO
from teamchat.application.dto._parse import parse_int
from teamchat.application.policies.permissions import Permission, assert_channel_access
from teamchat.application.uow import UnitOfWork
from teamchat.domain.entities.webhook import WebhookSubscription
from teamchat.services._boundary import service_boundary


@service_boundary
async def list_webhooks(
    channel_id: Any,
    identity: Identity,
    uow: UnitOfWork,
) -> list[WebhookSubscription]:
    cid = parse_int(channel_id, "channel_id")
    await assert_channel_access(identity, cid, uow, Permission.ADMIN)
    return await uow.webhooks.list_for_channel(cid)


@service_boundary
async def create_webhook(
    dto: CreateWebhookDTO,
    identity: Identity,
    uow: UnitOfWork,
) -> WebhookSubscription:
    await assert_channel_access(identity, dto.channel_id, uow, Permission.ADMIN)
    hook = await uow.webhooks_w.create(dto)
    await uow.commit()
    return hook
