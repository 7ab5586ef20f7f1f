from __future__ import annotations

from dataclasses import dataclass

from teamchat.domain.entities.user import User


@dataclass(frozen=True, slots=True)
class TokenPair:
    user: User
    access_token: str
    refresh_token: str
