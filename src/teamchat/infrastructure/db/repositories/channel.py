from __future__ import annotations

from typing import Sequence

from sqlalchemy import delete, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from teamchat.application.dto.channel import CreateChannelDTO
from teamchat.domain.entities.channel import Channel
from teamchat.infrastructure.db.mappers import channel as mapper
from teamchat.infrastructure.db.models.channel import ChannelModel, ChannelRoleVisibilityModel


class ChannelReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, channel_id: int) -> Channel | None:
        result = await self._session.get(ChannelModel, channel_id)
        return mapper.model_to_entity(result) if result else None

    async def get_by_name(self, name: str) -> Channel | None:
        stmt = select(ChannelModel).where(ChannelModel.name == name).limit(1)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def list_active(self) -> list[Channel]:
        stmt = (
            select(ChannelModel)
            .where(ChannelModel.is_active.is_(True))
            .order_by(ChannelModel.created_at.desc(), ChannelModel.id.desc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def list_accessible(
        self,
        user_id: str,
        role_ids: Sequence[str],
    ) -> list[Channel]:
        conditions = [ChannelModel.created_by == user_id]
        if role_ids:
            visible = select(ChannelRoleVisibilityModel.channel_id).where(
                ChannelRoleVisibilityModel.role_id.in_(list(role_ids))
            )
            conditions.append(ChannelModel.id.in_(visible))
        stmt = (
            select(ChannelModel)
            .where(ChannelModel.is_active.is_(True), or_(*conditions))
            .order_by(ChannelModel.created_at.desc(), ChannelModel.id.desc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def list_visibility_role_ids(self, channel_id: int) -> list[str]:
        stmt = select(ChannelRoleVisibilityModel.role_id).where(
            ChannelRoleVisibilityModel.channel_id == channel_id
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())


class ChannelWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, data: CreateChannelDTO) -> Channel:
        model = ChannelModel(
            name=data.name,
            icon_codepoint=data.icon_codepoint,
            icon_color=data.icon_color,
            created_by=data.created_by,
        )
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def replace_visibility(
        self,
        channel_id: int,
        role_ids: Sequence[str],
    ) -> None:
        await self._session.execute(
            delete(ChannelRoleVisibilityModel).where(
                ChannelRoleVisibilityModel.channel_id == channel_id
            )
        )
        if not role_ids:
            return
        stmt = (
            pg_insert(ChannelRoleVisibilityModel)
            .values([{"channel_id": channel_id, "role_id": rid} for rid in role_ids])
            .on_conflict_do_nothing(constraint="uq_channel_role_visibility")
        )
        await self._session.execute(stmt)
