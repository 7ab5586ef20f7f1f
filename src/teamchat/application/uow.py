from __future__ import annotations

from typing import Protocol

from teamchat.application.repositories.channel import ChannelReader, ChannelWriter
from teamchat.application.repositories.message import MessageReader, MessageWriter
from teamchat.application.repositories.read_receipt import ReadReceiptWriter
from teamchat.application.repositories.refresh_token import RefreshTokenStore
from teamchat.application.repositories.role import RoleReader, RoleWriter
from teamchat.application.repositories.user import UserReader, UserWriter
from teamchat.application.repositories.webhook import WebhookReader, WebhookWriter


class UnitOfWork(Protocol):
    channels: ChannelReader
    channels_w: ChannelWriter
    roles: RoleReader
    roles_w: RoleWriter
    users: UserReader
    users_w: UserWriter
    messages: MessageReader
    messages_w: MessageWriter
    read_receipts_w: ReadReceiptWriter
    webhooks: WebhookReader
    webhooks_w: WebhookWriter
    refresh_tokens: RefreshTokenStore

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...
