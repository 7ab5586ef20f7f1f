from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teamchat.application.dto.webhook import CreateWebhookDTO
from teamchat.domain.entities.webhook import WebhookSubscription
from teamchat.infrastructure.db.mappers import webhook as mapper
from teamchat.infrastructure.db.models.webhook import WebhookSubscriptionModel


class WebhookReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_channel(self, channel_id: int) -> list[WebhookSubscription]:
        stmt = (
            select(WebhookSubscriptionModel)
            .where(WebhookSubscriptionModel.channel_id == channel_id)
            .order_by(WebhookSubscriptionModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def find_by_secret(
        self,
        channel_id: int,
        secret: str,
    ) -> WebhookSubscription | None:
        stmt = (
            select(WebhookSubscriptionModel)
            .where(
                WebhookSubscriptionModel.channel_id == channel_id,
                WebhookSubscriptionModel.secret_token == secret,
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None


class WebhookWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, data: CreateWebhookDTO) -> WebhookSubscription:
        model = WebhookSubscriptionModel(
            channel_id=data.channel_id,
            url=data.url,
            secret_token=data.secret_token,
        )
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)
