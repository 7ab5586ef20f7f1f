from __future__ import annotations

from datetime import datetime
from typing import Protocol

from teamchat.domain.entities.refresh_token import RefreshToken


class RefreshTokenStore(Protocol):
    async def add(
        self,
        user_id: str,
        token: str,
        expires_at: datetime,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> None: ...

    async def find_active(self, token: str) -> RefreshToken | None: ...

    async def revoke(self, token: str) -> None: ...
