from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Header

from teamchat.api.deps import CurrentIdentity, PublisherDep, UoWDep
from teamchat.api.v1.schemas.common import DataResponse
from teamchat.api.v1.schemas.message import MessageResponse
from teamchat.api.v1.schemas.webhook import (
    CreateWebhookRequest,
    NotificationIngestRequest,
    WebhookIngestRequest,
    WebhookResponse,
)
from teamchat.application.dto.message import NotificationIngestDTO, WebhookIngestDTO
from teamchat.application.dto.webhook import CreateWebhookDTO
from teamchat.config import settings
from teamchat.services import message_service, webhook_service

router = APIRouter(prefix="/api/v1/webhooks", tags=["webhooks"])

SecretHeader = Annotated[str | None, Header(alias="X-Webhook-Secret")]


@router.get("/{channel_id}", response_model=DataResponse[list[WebhookResponse]])
async def list_webhooks(
    channel_id: str,
    identity: CurrentIdentity,
    uow: UoWDep,
) -> DataResponse[list[WebhookResponse]]:
    hooks = await webhook_service.list_webhooks(channel_id, identity, uow)
    return DataResponse(
        message="Webhooks fetched",
        data=[WebhookResponse.model_validate(h) for h in hooks],
    )


@router.post("", response_model=DataResponse[WebhookResponse], status_code=201)
async def create_webhook(
    body: CreateWebhookRequest,
    identity: CurrentIdentity,
    uow: UoWDep,
) -> DataResponse[WebhookResponse]:
    dto = CreateWebhookDTO.from_raw(body.channel_id, body.url, body.secret_token)
    hook = await webhook_service.create_webhook(dto, identity, uow)
    return DataResponse(message="Webhook created", data=WebhookResponse.model_validate(hook))


@router.post("/incoming", response_model=DataResponse[MessageResponse], status_code=201)
async def incoming(
    body: WebhookIngestRequest,
    uow: UoWDep,
    publisher: PublisherDep,
    secret: SecretHeader = None,
) -> DataResponse[MessageResponse]:
    dto = WebhookIngestDTO.from_raw(
        body.channel_id,
        secret or body.secret_token,
        body.content,
        body.sender_uuid,
        body.image_url,
    )
    view = await message_service.ingest_webhook(
        dto, uow, publisher, default_sender_id=settings.WEBHOOK_DEFAULT_SENDER_UUID
    )
    return DataResponse(message="Webhook message posted", data=MessageResponse.from_view(view))


@router.post("/notify", response_model=DataResponse[MessageResponse], status_code=201)
async def notify(
    body: NotificationIngestRequest,
    uow: UoWDep,
    publisher: PublisherDep,
    secret: SecretHeader = None,
) -> DataResponse[MessageResponse]:
    dto = NotificationIngestDTO.from_raw(
        body.channel_id,
        secret or body.secret_token,
        body.content,
        body.title,
        body.sender_uuid,
    )
    view = await message_service.ingest_notification(
        dto, uow, publisher, default_sender_id=settings.WEBHOOK_DEFAULT_SENDER_UUID
    )
    return DataResponse(message="Notification posted", data=MessageResponse.from_view(view))
