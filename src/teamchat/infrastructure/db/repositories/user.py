from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teamchat.application.repositories.user import NewUser
from teamchat.domain.entities.user import User
from teamchat.infrastructure.db.mappers import user as mapper
from teamchat.infrastructure.db.models.user import UserModel
from teamchat.infrastructure.db.repositories._ids import is_uuid


class UserReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: str) -> User | None:
        if not is_uuid(user_id):
            return None
        result = await self._session.get(UserModel, user_id)
        return mapper.model_to_entity(result) if result else None

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(UserModel).where(UserModel.email == email).limit(1)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def list_all(self) -> list[User]:
        stmt = select(UserModel).order_by(UserModel.created_at.desc(), UserModel.email)
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class UserWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, user: NewUser) -> User:
        model = UserModel(
            email=user.email,
            display_name=user.display_name,
            password_hash=user.password_hash,
            role=user.role,
        )
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)
