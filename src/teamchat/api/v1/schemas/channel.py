from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from teamchat.application.dto.channel import ChannelSummary
from teamchat.domain.entities.channel import Channel


class CreateChannelRequest(BaseModel):
    name: Any = None
    icon_codepoint: Any = None
    icon_color: Any = None
    created_by: Any = None


class UpdateChannelRolesRequest(BaseModel):
    role_ids: Any = None


class ChannelResponse(BaseModel):
    id: int
    name: str
    icon_codepoint: int | None
    icon_color: str | None
    is_active: bool
    created_by: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, channel: Channel) -> ChannelResponse:
        return cls(
            id=channel.id,
            name=channel.name,
            icon_codepoint=channel.icon_codepoint,
            icon_color=channel.icon_color,
            is_active=channel.is_active,
            created_by=channel.owner_id,
            created_at=channel.created_at,
            updated_at=channel.updated_at,
        )


class ChannelSummaryResponse(ChannelResponse):
    last_message_content: str | None = None
    last_message_at: datetime | None = None
    unread_count: int = 0

    @classmethod
    def from_summary(cls, summary: ChannelSummary) -> ChannelSummaryResponse:
        base = ChannelResponse.from_entity(summary.channel)
        return cls(
            **base.model_dump(),
            last_message_content=summary.last_message_content,
            last_message_at=summary.last_message_at,
            unread_count=summary.unread_count,
        )


class RoleVisibilityResponse(BaseModel):
    id: str
    name: str
    has_access: bool

    model_config = {"from_attributes": True}
