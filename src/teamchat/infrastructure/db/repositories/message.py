from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Any, Sequence

from sqlalchemy import exists, func, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from teamchat.application.repositories.message import MessageRecord, NewMessage
from teamchat.domain.entities.message import Message
from teamchat.infrastructure.db.mappers import message as mapper
from teamchat.infrastructure.db.models.message import MessageModel
from teamchat.infrastructure.db.models.read_receipt import MessageReadModel
from teamchat.infrastructure.db.models.user import UserModel


def _unread_by(channel_id: int, user_id: str) -> list[Any]:
    already_read = exists().where(
        MessageReadModel.message_id == MessageModel.id,
        MessageReadModel.user_id == user_id,
    )
    return [
        MessageModel.channel_id == channel_id,
        ~already_read,
        or_(MessageModel.sender_id.is_(None), MessageModel.sender_id != user_id),
    ]


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def _with_sender(self):
        return select(MessageModel, UserModel.display_name).outerjoin(
            UserModel, UserModel.id == MessageModel.sender_id
        )

    async def _readers(self, message_ids: list[int]) -> dict[int, list[str]]:
        if not message_ids:
            return {}
        stmt = (
            select(MessageReadModel.message_id, MessageReadModel.user_id)
            .where(MessageReadModel.message_id.in_(message_ids))
            .order_by(MessageReadModel.read_at.asc(), MessageReadModel.id.asc())
        )
        result = await self._session.execute(stmt)
        readers: dict[int, list[str]] = defaultdict(list)
        for message_id, user_id in result.all():
            readers[message_id].append(user_id)
        return readers

    async def _records(self, stmt) -> list[MessageRecord]:
        result = await self._session.execute(stmt)
        rows = result.all()
        readers = await self._readers([m.id for m, _ in rows])
        return [
            MessageRecord(
                message=mapper.model_to_entity(model),
                sender_name=name,
                read_by=tuple(readers.get(model.id, ())),
            )
            for model, name in rows
        ]

    async def list_for_channel(self, channel_id: int) -> list[MessageRecord]:
        stmt = (
            self._with_sender()
            .where(MessageModel.channel_id == channel_id)
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        return await self._records(stmt)

    async def get_record(self, message_id: int) -> MessageRecord | None:
        records = await self._records(
            self._with_sender().where(MessageModel.id == message_id)
        )
        return records[0] if records else None

    async def find_unread_ids(
        self,
        channel_id: int,
        user_id: str,
        message_ids: Sequence[int] | None = None,
    ) -> list[int]:
        stmt = (
            select(MessageModel.id)
            .where(*_unread_by(channel_id, user_id))
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        if message_ids:
            stmt = stmt.where(MessageModel.id.in_(list(message_ids)))
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def last_for_channel(self, channel_id: int) -> Message | None:
        stmt = (
            select(MessageModel)
            .where(MessageModel.channel_id == channel_id)
            .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def count_unread(self, channel_id: int, user_id: str) -> int:
        stmt = select(func.count(MessageModel.id)).where(*_unread_by(channel_id, user_id))
        result = await self._session.execute(stmt)
        return int(result.scalar_one())


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        message: NewMessage,
        *,
        read_by: str | None = None,
        read_at: datetime | None = None,
    ) -> Message:
        model = mapper.new_to_model(message)
        self._session.add(model)
        await self._session.flush()

        if read_by is not None:
            stmt = (
                pg_insert(MessageReadModel)
                .values(
                    message_id=model.id,
                    user_id=read_by,
                    read_at=read_at or func.now(),
                )
                .on_conflict_do_nothing(constraint="uq_message_read")
            )
            await self._session.execute(stmt)

        return mapper.model_to_entity(model)
