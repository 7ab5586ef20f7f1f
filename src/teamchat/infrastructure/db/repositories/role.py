from __future__ import annotations

from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from teamchat.domain.entities.user import Role
from teamchat.infrastructure.db.mappers import user as mapper
from teamchat.infrastructure.db.models.user import RoleModel, UserRoleModel
from teamchat.infrastructure.db.repositories._ids import is_uuid


class RoleReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_role_ids_for_user(self, user_id: str) -> list[str]:
        if not is_uuid(user_id):
            return []
        stmt = select(UserRoleModel.role_id).where(UserRoleModel.user_id == user_id)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_user(self, user_id: str) -> list[Role]:
        if not is_uuid(user_id):
            return []
        stmt = (
            select(RoleModel)
            .join(UserRoleModel, UserRoleModel.role_id == RoleModel.id)
            .where(UserRoleModel.user_id == user_id)
            .order_by(RoleModel.name)
        )
        result = await self._session.execute(stmt)
        return [mapper.role_to_entity(m) for m in result.scalars().all()]

    async def list_all(self) -> list[Role]:
        result = await self._session.execute(select(RoleModel).order_by(RoleModel.name))
        return [mapper.role_to_entity(m) for m in result.scalars().all()]

    async def get_by_name(self, name: str) -> Role | None:
        stmt = select(RoleModel).where(RoleModel.name == name).limit(1)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.role_to_entity(model) if model else None

    async def existing_ids(self, role_ids: Sequence[str]) -> set[str]:
        # role ids are uuid columns; anything else can't exist
        candidates = [rid for rid in role_ids if is_uuid(rid)]
        if not candidates:
            return set()
        stmt = select(RoleModel.id).where(RoleModel.id.in_(candidates))
        result = await self._session.execute(stmt)
        return set(result.scalars().all())


class RoleWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, name: str) -> Role:
        model = RoleModel(name=name)
        self._session.add(model)
        await self._session.flush()
        return mapper.role_to_entity(model)

    async def replace_for_user(self, user_id: str, role_ids: Sequence[str]) -> None:
        await self._session.execute(
            delete(UserRoleModel).where(UserRoleModel.user_id == user_id)
        )
        if not role_ids:
            return
        stmt = (
            pg_insert(UserRoleModel)
            .values([{"user_id": user_id, "role_id": rid} for rid in role_ids])
            .on_conflict_do_nothing(constraint="uq_user_role")
        )
        await self._session.execute(stmt)
