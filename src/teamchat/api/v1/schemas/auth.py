from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from teamchat.application.dto.auth import TokenPair
from teamchat.domain.entities.user import User


class LoginRequest(BaseModel):
    email: Any = None
    password: Any = None


class RegisterRequest(BaseModel):
    email: Any = None
    password: Any = None
    display_name: Any = None


class RefreshRequest(BaseModel):
    refresh_token: Any = Field(default=None, alias="refreshToken")

    model_config = {"populate_by_name": True}


class UserResponse(BaseModel):
    id: str
    email: str
    display_name: str
    role: str
    created_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> UserResponse:
        return cls(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            role=user.role,
            created_at=user.created_at,
        )


class TokenPairResponse(BaseModel):
    user: UserResponse
    access_token: str = Field(alias="accessToken")
    refresh_token: str = Field(alias="refreshToken")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_pair(cls, pair: TokenPair) -> TokenPairResponse:
        return cls(
            user=UserResponse.from_entity(pair.user),
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        )
