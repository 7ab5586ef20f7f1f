from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from teamchat.application.dto.message import MessageView


class PostMessageRequest(BaseModel):
    channel_id: Any = None
    content: Any = None
    type: Any = None


class MarkReadRequest(BaseModel):
    message_ids: Any = None


class MessageResponse(BaseModel):
    id: int
    channel_id: int
    type: str
    content: str
    image_url: str | None = None
    sender_uuid: str
    sender_name: str
    created_at: datetime
    read_by: list[str]

    @classmethod
    def from_view(cls, view: MessageView) -> MessageResponse:
        return cls(
            id=view.id,
            channel_id=view.channel_id,
            type=view.type,
            content=view.content,
            image_url=view.image_url,
            sender_uuid=view.sender_id or "",
            sender_name=view.sender_name,
            created_at=view.created_at,
            read_by=list(view.read_by),
        )


class MarkReadResponse(BaseModel):
    message_ids: list[int]
