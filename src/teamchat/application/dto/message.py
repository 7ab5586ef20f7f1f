from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from teamchat.application.dto._parse import clean_str, optional_str, parse_int
from teamchat.application.exceptions import AuthError, ValidationError
from teamchat.domain.value_objects.enums import MessageType


@dataclass(frozen=True, slots=True)
class PostMessageDTO:
    channel_id: int
    content: str
    type: MessageType = MessageType.TEXT

    @classmethod
    def from_raw(cls, channel_id: Any, content: Any, type: Any = None) -> PostMessageDTO:
        cid = parse_int(channel_id, "channel_id")
        text = clean_str(content)
        if not text:
            raise ValidationError("content is required")
        try:
            msg_type = MessageType(type) if type else MessageType.TEXT
        except ValueError:
            raise ValidationError(f"Unknown message type: {type}") from None
        return cls(channel_id=cid, content=text, type=msg_type)


@dataclass(frozen=True, slots=True)
class MarkReadDTO:
    channel_id: int
    message_ids: tuple[int, ...] | None = None

    @classmethod
    def from_raw(cls, channel_id: Any, message_ids: Any = None) -> MarkReadDTO:
        cid = parse_int(channel_id, "channel_id")
        ids: tuple[int, ...] | None = None
        if isinstance(message_ids, list):
            parsed = []
            for raw in message_ids:
                try:
                    parsed.append(parse_int(raw, "message_id"))
                except ValidationError:
                    continue
            # an empty explicit list means "everything eligible"
            ids = tuple(dict.fromkeys(parsed)) or None
        return cls(channel_id=cid, message_ids=ids)


def _require_secret(secret: Any) -> str:
    value = clean_str(secret)
    if not value:
        raise AuthError("Webhook secret is missing")
    return value


@dataclass(frozen=True, slots=True)
class WebhookIngestDTO:
    channel_id: int
    secret: str
    content: str
    sender_id: str | None = None
    image_url: str | None = None

    @classmethod
    def from_raw(
        cls,
        channel_id: Any,
        secret: Any,
        content: Any = None,
        sender_uuid: Any = None,
        image_url: Any = None,
    ) -> WebhookIngestDTO:
        cid = parse_int(channel_id, "channel_id")
        token = _require_secret(secret)
        text = clean_str(content)
        image = optional_str(image_url)
        if not text and not image:
            raise ValidationError("content or image_url is required")
        return cls(
            channel_id=cid,
            secret=token,
            content=text,
            sender_id=optional_str(sender_uuid),
            image_url=image,
        )


@dataclass(frozen=True, slots=True)
class NotificationIngestDTO:
    channel_id: int
    secret: str
    content: str
    title: str | None = None
    sender_id: str | None = None

    @classmethod
    def from_raw(
        cls,
        channel_id: Any,
        secret: Any,
        content: Any = None,
        title: Any = None,
        sender_uuid: Any = None,
    ) -> NotificationIngestDTO:
        cid = parse_int(channel_id, "channel_id")
        token = _require_secret(secret)
        text = clean_str(content)
        if not text:
            raise ValidationError("content is required")
        return cls(
            channel_id=cid,
            secret=token,
            content=text,
            title=optional_str(title),
            sender_id=optional_str(sender_uuid),
        )


@dataclass(frozen=True, slots=True)
class MessageView:
    """Wire shape of a message as pushed in ``message:new`` and returned by the API."""

    id: int
    channel_id: int
    type: str
    content: str
    sender_id: str | None
    sender_name: str
    created_at: datetime
    read_by: tuple[str, ...] = ()
    image_url: str | None = None

    def to_payload(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "channel_id": self.channel_id,
            "type": self.type,
            "content": self.content,
        }
        if self.image_url is not None:
            data["image_url"] = self.image_url
        data.update(
            sender_uuid=self.sender_id or "",
            sender_name=self.sender_name,
            created_at=self.created_at.isoformat(),
            read_by=list(self.read_by),
        )
        return data
