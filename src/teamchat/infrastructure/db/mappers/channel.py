from __future__ import annotations

from teamchat.domain.entities.channel import Channel
from teamchat.infrastructure.db.models.channel import ChannelModel


def model_to_entity(model: ChannelModel) -> Channel:
    return Channel(
        id=model.id,
        name=model.name,
        owner_id=model.created_by,
        is_active=model.is_active,
        icon_codepoint=model.icon_codepoint,
        icon_color=model.icon_color,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )
