from __future__ import annotations

from teamchat.application.repositories.message import NewMessage
from teamchat.domain.entities.message import Message
from teamchat.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        channel_id=model.channel_id,
        type=model.type,
        content=model.content,
        sender_id=model.sender_id,
        image_url=model.image_url,
        created_at=model.created_at,
    )


def new_to_model(new: NewMessage) -> MessageModel:
    return MessageModel(
        channel_id=new.channel_id,
        type=new.type,
        content=new.content,
        sender_id=new.sender_id,
        image_url=new.image_url,
    )
