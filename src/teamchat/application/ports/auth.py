from __future__ import annotations

from datetime import timedelta
from typing import Protocol

from teamchat.application.dto.identity import Identity


class TokenVerifier(Protocol):
    async def verify(self, token: str) -> Identity: ...


class TokenIssuer(Protocol):
    @property
    def refresh_ttl(self) -> timedelta: ...

    def issue_access(self, identity: Identity) -> str: ...

    def issue_refresh(self, user_id: str) -> str: ...

    async def verify_refresh(self, token: str) -> str:
        """Return the subject of a valid refresh token."""
        ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...

    def verify(self, password: str, password_hash: str) -> bool: ...
