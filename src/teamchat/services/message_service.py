from __future__ import annotations

import dataclasses
import logging
from typing import Any

from teamchat.application.dto.identity import Identity
from teamchat.application.dto.message import (
    MarkReadDTO,
    MessageView,
    NotificationIngestDTO,
    PostMessageDTO,
    WebhookIngestDTO,
)
from teamchat.application.dto._parse import parse_int
from teamchat.application.exceptions import (
    AuthError,
    ErrorKind,
    NotFoundError,
    ValidationError,
)
from teamchat.application.policies.permissions import Permission, assert_channel_access
from teamchat.application.ports.clock import Clock, SystemClock
from teamchat.application.ports.realtime import RealtimePublisher
from teamchat.application.ports.webhooks import OutboundWebhookDispatcher
from teamchat.application.repositories.message import MessageRecord, NewMessage
from teamchat.application.uow import UnitOfWork
from teamchat.domain.entities.channel import Channel
from teamchat.domain.entities.message import Message
from teamchat.domain.entities.read_receipt import ReadReceipt
from teamchat.domain.value_objects.enums import MessageType, RealtimeEvent
from teamchat.services._boundary import service_boundary

logger = logging.getLogger(__name__)

UNKNOWN_SENDER = "Unknown"
WEBHOOK_SENDER = "Webhook"
NOTIFICATION_SENDER = "Notification"

OUTBOUND_EVENT = "message.new"


def _to_view(record: MessageRecord, fallback_name: str) -> MessageView:
    msg = record.message
    return MessageView(
        id=msg.id,
        channel_id=msg.channel_id,
        type=msg.type,
        content=msg.content,
        sender_id=msg.sender_id,
        sender_name=record.sender_name or fallback_name,
        created_at=msg.created_at,
        read_by=record.read_by,
        image_url=msg.image_url,
    )


async def _load_view(
    uow: UnitOfWork,
    message: Message,
    fallback_name: str,
    read_by: tuple[str, ...] = (),
) -> MessageView:
    """Reload the committed message with its joins, or fall back to what was inserted."""
    try:
        record = await uow.messages.get_record(message.id)
    except Exception:
        logger.exception("Failed to reload message %s", message.id)
        record = None
    if record is None:
        record = MessageRecord(message=message, sender_name=None, read_by=read_by)
    return _to_view(record, fallback_name)


def outbound_payload(view: MessageView) -> dict[str, Any]:
    return {
        "event": OUTBOUND_EVENT,
        "data": {
            "id": view.id,
            "channel_id": view.channel_id,
            "content": view.content,
            "sender_uuid": view.sender_id or "",
            "created_at": view.created_at.isoformat(),
        },
    }


async def _dispatch_outbound(
    uow: UnitOfWork,
    dispatcher: OutboundWebhookDispatcher,
    view: MessageView,
) -> None:
    # runs after commit, so failures never reach the caller
    try:
        hooks = await uow.webhooks.list_for_channel(view.channel_id)
        if hooks:
            dispatcher.dispatch(hooks, outbound_payload(view))
    except Exception:
        logger.exception("Failed to dispatch webhooks for channel %s", view.channel_id)


async def _mark_unread(
    uow: UnitOfWork,
    channel_id: int,
    user_id: str,
    clock: Clock,
    message_ids: tuple[int, ...] | None = None,
) -> list[int]:
    """Insert missing receipts and return only the ids this call actually marked."""
    ids = await uow.messages.find_unread_ids(channel_id, user_id, message_ids)
    if not ids:
        return []
    read_at = clock.now()
    inserted = set(
        await uow.read_receipts_w.bulk_insert(
            [ReadReceipt(message_id=mid, user_id=user_id, read_at=read_at) for mid in ids]
        )
    )
    await uow.commit()
    return [mid for mid in ids if mid in inserted]


async def _publish_read(
    publisher: RealtimePublisher,
    channel_id: int,
    message_ids: list[int],
    user_id: str,
) -> None:
    await publisher.publish(
        channel_id,
        RealtimeEvent.MESSAGE_READ,
        {"messageIds": message_ids, "userId": user_id},
    )


@service_boundary
async def post_message(
    dto: PostMessageDTO,
    identity: Identity,
    uow: UnitOfWork,
    publisher: RealtimePublisher,
    dispatcher: OutboundWebhookDispatcher | None = None,
    clock: Clock | None = None,
) -> MessageView:
    """Persist a message with the poster's own receipt, then fan it out."""
    clock = clock or SystemClock()
    await assert_channel_access(identity, dto.channel_id, uow, Permission.WRITE)

    message = await uow.messages_w.create(
        NewMessage(
            channel_id=dto.channel_id,
            type=dto.type.value,
            content=dto.content,
            sender_id=identity.id,
        ),
        read_by=identity.id,
        read_at=clock.now(),
    )
    await uow.commit()

    view = await _load_view(uow, message, UNKNOWN_SENDER, (identity.id,))
    await publisher.publish(dto.channel_id, RealtimeEvent.MESSAGE_NEW, view.to_payload())

    if dispatcher is not None:
        await _dispatch_outbound(uow, dispatcher, view)
    return view


@service_boundary
async def fetch_messages(
    channel_id: Any,
    identity: Identity,
    uow: UnitOfWork,
    publisher: RealtimePublisher,
    clock: Clock | None = None,
) -> list[MessageView]:
    """Return the channel timeline and mark everything shown as read by the caller.

    The payload reflects receipts as they were before this call. A failure
    while recording receipts is logged and the messages are still returned.
    """
    clock = clock or SystemClock()
    cid = parse_int(channel_id, "channel_id")
    await assert_channel_access(identity, cid, uow, Permission.READ)

    records = await uow.messages.list_for_channel(cid)
    views = [_to_view(r, UNKNOWN_SENDER) for r in records]

    try:
        marked = await _mark_unread(uow, cid, identity.id, clock)
    except Exception:
        logger.exception("Failed to record read receipts for channel %s", cid)
        await uow.rollback()
        return views

    if marked:
        await _publish_read(publisher, cid, marked, identity.id)
    return views


@service_boundary
async def mark_read(
    dto: MarkReadDTO,
    identity: Identity,
    uow: UnitOfWork,
    publisher: RealtimePublisher,
    clock: Clock | None = None,
) -> list[int]:
    """Record receipts for the caller and return the ids newly marked."""
    clock = clock or SystemClock()
    await assert_channel_access(identity, dto.channel_id, uow, Permission.WRITE)

    marked = await _mark_unread(uow, dto.channel_id, identity.id, clock, dto.message_ids)
    if marked:
        await _publish_read(publisher, dto.channel_id, marked, identity.id)
    return marked


async def _authenticate_hook(uow: UnitOfWork, channel_id: int, secret: str) -> Channel:
    hook = await uow.webhooks.find_by_secret(channel_id, secret)
    if hook is None:
        raise AuthError("Invalid webhook secret")
    channel = await uow.channels.get_by_id(channel_id)
    if channel is None:
        raise NotFoundError("Channel not found")
    return channel


def _resolve_sender(
    explicit: str | None,
    channel: Channel,
    default_sender_id: str | None,
) -> str:
    sender = explicit or channel.owner_id or default_sender_id
    if not sender:
        raise ValidationError(
            "No sender could be resolved; pass sender_uuid or configure "
            "WEBHOOK_DEFAULT_SENDER_UUID",
            kind=ErrorKind.NO_SENDER_RESOLVABLE,
        )
    return sender


@service_boundary
async def ingest_webhook(
    dto: WebhookIngestDTO,
    uow: UnitOfWork,
    publisher: RealtimePublisher,
    default_sender_id: str | None = None,
) -> MessageView:
    channel = await _authenticate_hook(uow, dto.channel_id, dto.secret)
    sender = _resolve_sender(dto.sender_id, channel, default_sender_id)

    message = await uow.messages_w.create(
        NewMessage(
            channel_id=dto.channel_id,
            type=(MessageType.IMAGE if dto.image_url else MessageType.WEBHOOK).value,
            content=dto.content,
            sender_id=sender,
            image_url=dto.image_url,
        )
    )
    await uow.commit()

    view = await _load_view(uow, message, WEBHOOK_SENDER)
    await publisher.publish(dto.channel_id, RealtimeEvent.MESSAGE_NEW, view.to_payload())
    return view


@service_boundary
async def ingest_notification(
    dto: NotificationIngestDTO,
    uow: UnitOfWork,
    publisher: RealtimePublisher,
    default_sender_id: str | None = None,
    clock: Clock | None = None,
) -> MessageView:
    clock = clock or SystemClock()
    channel = await _authenticate_hook(uow, dto.channel_id, dto.secret)
    sender = _resolve_sender(dto.sender_id, channel, default_sender_id)

    message = await uow.messages_w.create(
        NewMessage(
            channel_id=dto.channel_id,
            type=MessageType.NOTIFICATION.value,
            content=dto.content,
            sender_id=sender,
        ),
        read_by=sender,
        read_at=clock.now(),
    )
    await uow.commit()

    view = dataclasses.replace(
        await _load_view(uow, message, NOTIFICATION_SENDER, (sender,)),
        sender_name=dto.title or NOTIFICATION_SENDER,
    )
    await publisher.publish(dto.channel_id, RealtimeEvent.MESSAGE_NEW, view.to_payload())
    return view
