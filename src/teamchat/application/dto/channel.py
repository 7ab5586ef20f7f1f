from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from teamchat.application.dto._parse import clean_str, optional_str, parse_id_list, parse_int
from teamchat.application.exceptions import ValidationError
from teamchat.domain.entities.channel import Channel


@dataclass(frozen=True, slots=True)
class CreateChannelDTO:
    name: str
    icon_codepoint: int | None = None
    icon_color: str | None = None
    created_by: str | None = None

    @classmethod
    def from_raw(
        cls,
        name: Any,
        icon_codepoint: Any = None,
        icon_color: Any = None,
        created_by: Any = None,
    ) -> CreateChannelDTO:
        clean_name = clean_str(name)
        if not clean_name:
            raise ValidationError("Channel name is required")
        codepoint = None
        if icon_codepoint is not None:
            codepoint = parse_int(icon_codepoint, "icon_codepoint")
        color = None
        if icon_color is not None:
            color = str(icon_color).strip().removeprefix("#") or None
        return cls(
            name=clean_name,
            icon_codepoint=codepoint,
            icon_color=color,
            created_by=optional_str(created_by),
        )


@dataclass(frozen=True, slots=True)
class UpdateChannelRolesDTO:
    channel_id: int
    role_ids: tuple[str, ...]

    @classmethod
    def from_raw(cls, channel_id: Any, role_ids: Any) -> UpdateChannelRolesDTO:
        return cls(
            channel_id=parse_int(channel_id, "channel_id"),
            role_ids=parse_id_list(role_ids, "role_ids"),
        )


@dataclass(frozen=True, slots=True)
class ChannelSummary:
    channel: Channel
    last_message_content: str | None
    last_message_at: datetime | None
    unread_count: int


@dataclass(frozen=True, slots=True)
class RoleVisibilityView:
    id: str
    name: str
    has_access: bool
