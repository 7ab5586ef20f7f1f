from __future__ import annotations

from types import TracebackType
from typing import Self

from sqlalchemy.ext.asyncio import AsyncSession

from teamchat.infrastructure.db.repositories.channel import (
    ChannelReaderRepo,
    ChannelWriterRepo,
)
from teamchat.infrastructure.db.repositories.message import (
    MessageReaderRepo,
    MessageWriterRepo,
)
from teamchat.infrastructure.db.repositories.read_receipt import ReadReceiptWriterRepo
from teamchat.infrastructure.db.repositories.refresh_token import RefreshTokenRepo
from teamchat.infrastructure.db.repositories.role import RoleReaderRepo, RoleWriterRepo
from teamchat.infrastructure.db.repositories.user import UserReaderRepo, UserWriterRepo
from teamchat.infrastructure.db.repositories.webhook import (
    WebhookReaderRepo,
    WebhookWriterRepo,
)


class SqlAlchemyUoW:
    """Unit of work over one AsyncSession; repositories share it."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.channels = ChannelReaderRepo(session)
        self.channels_w = ChannelWriterRepo(session)
        self.roles = RoleReaderRepo(session)
        self.roles_w = RoleWriterRepo(session)
        self.users = UserReaderRepo(session)
        self.users_w = UserWriterRepo(session)
        self.messages = MessageReaderRepo(session)
        self.messages_w = MessageWriterRepo(session)
        self.read_receipts_w = ReadReceiptWriterRepo(session)
        self.webhooks = WebhookReaderRepo(session)
        self.webhooks_w = WebhookWriterRepo(session)
        self.refresh_tokens = RefreshTokenRepo(session)

    async def flush(self) -> None:
        await self._session.flush()

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()
