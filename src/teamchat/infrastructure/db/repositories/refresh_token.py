from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from teamchat.domain.entities.refresh_token import RefreshToken
from teamchat.infrastructure.db.models.refresh_token import RefreshTokenModel


class RefreshTokenRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        user_id: str,
        token: str,
        expires_at: datetime,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        self._session.add(
            RefreshTokenModel(
                user_id=user_id,
                token=token,
                expires_at=expires_at,
                ip_address=ip_address,
                user_agent=user_agent,
            )
        )
        await self._session.flush()

    async def find_active(self, token: str) -> RefreshToken | None:
        stmt = select(RefreshTokenModel).where(
            RefreshTokenModel.token == token,
            RefreshTokenModel.is_revoked.is_(False),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return RefreshToken(
            id=model.id,
            user_id=model.user_id,
            token=model.token,
            expires_at=model.expires_at,
            is_revoked=model.is_revoked,
        )

    async def revoke(self, token: str) -> None:
        stmt = (
            update(RefreshTokenModel)
            .where(RefreshTokenModel.token == token)
            .values(is_revoked=True)
        )
        await self._session.execute(stmt)
