from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class CreateWebhookRequest(BaseModel):
    channel_id: Any = None
    url: Any = None
    secret_token: Any = None


class WebhookIngestRequest(BaseModel):
    channel_id: Any = None
    content: Any = None
    sender_uuid: Any = None
    image_url: Any = None
    secret_token: Any = None


class NotificationIngestRequest(BaseModel):
    channel_id: Any = None
    title: Any = None
    content: Any = None
    sender_uuid: Any = None
    secret_token: Any = None


class WebhookResponse(BaseModel):
    id: int
    channel_id: int
    url: str
    secret_token: str
    created_at: datetime

    model_config = {"from_attributes": True}
