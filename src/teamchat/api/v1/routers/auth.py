from __future__ import annotations

from fastapi import APIRouter, Request

from teamchat.api.deps import AuthenticatorDep, PasswordHasherDep, UoWDep
from teamchat.api.v1.schemas.auth import (
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenPairResponse,
    UserResponse,
)
from teamchat.api.v1.schemas.common import DataResponse
from teamchat.application.dto.user import RegisterUserDTO
from teamchat.services import auth_service

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _client_meta(request: Request) -> dict[str, str | None]:
    return {
        "ip_address": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
    }


@router.post("/login", response_model=DataResponse[TokenPairResponse])
async def login(
    body: LoginRequest,
    request: Request,
    uow: UoWDep,
    hasher: PasswordHasherDep,
    authenticator: AuthenticatorDep,
) -> DataResponse[TokenPairResponse]:
    pair = await auth_service.login(
        body.email,
        body.password,
        uow,
        hasher,
        authenticator,
        **_client_meta(request),
    )
    return DataResponse(message="Logged in", data=TokenPairResponse.from_pair(pair))


@router.post("/refresh", response_model=DataResponse[TokenPairResponse])
async def refresh(
    body: RefreshRequest,
    request: Request,
    uow: UoWDep,
    authenticator: AuthenticatorDep,
) -> DataResponse[TokenPairResponse]:
    pair = await auth_service.refresh(
        body.refresh_token,
        uow,
        authenticator,
        **_client_meta(request),
    )
    return DataResponse(message="Token refreshed", data=TokenPairResponse.from_pair(pair))


@router.post("/register", response_model=DataResponse[UserResponse], status_code=201)
async def register(
    body: RegisterRequest,
    uow: UoWDep,
    hasher: PasswordHasherDep,
) -> DataResponse[UserResponse]:
    dto = RegisterUserDTO.from_raw(body.email, body.password, body.display_name)
    user = await auth_service.register(dto, uow, hasher)
    return DataResponse(message="Registered", data=UserResponse.from_entity(user))
