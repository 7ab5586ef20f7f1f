from __future__ import annotations

from teamchat.domain.entities.webhook import WebhookSubscription
from teamchat.infrastructure.db.models.webhook import WebhookSubscriptionModel


def model_to_entity(model: WebhookSubscriptionModel) -> WebhookSubscription:
    return WebhookSubscription(
        id=model.id,
        channel_id=model.channel_id,
        url=model.url,
        secret_token=model.secret_token,
        created_at=model.created_at,
    )
