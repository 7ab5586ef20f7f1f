from __future__ import annotations

from fastapi import APIRouter

from teamchat.api.deps import CurrentIdentity, UoWDep
from teamchat.api.v1.schemas.auth import UserResponse
from teamchat.api.v1.schemas.common import DataResponse
from teamchat.api.v1.schemas.user import UpdateUserRolesRequest, UserRolesResponse
from teamchat.application.dto.user import UpdateUserRolesDTO
from teamchat.services import user_service

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=DataResponse[list[UserResponse]])
async def list_users(
    identity: CurrentIdentity,
    uow: UoWDep,
) -> DataResponse[list[UserResponse]]:
    users = await user_service.list_users(identity, uow)
    return DataResponse(
        message="Users fetched",
        data=[UserResponse.from_entity(u) for u in users],
    )


@router.get("/{user_id}/roles", response_model=DataResponse[UserRolesResponse])
async def get_user_roles(
    user_id: str,
    identity: CurrentIdentity,
    uow: UoWDep,
) -> DataResponse[UserRolesResponse]:
    roles = await user_service.get_user_roles(user_id, identity, uow)
    return DataResponse(
        message="User roles fetched",
        data=UserRolesResponse.from_roles(user_id, roles),
    )


@router.put("/{user_id}/roles", response_model=DataResponse[UserRolesResponse])
async def update_user_roles(
    user_id: str,
    body: UpdateUserRolesRequest,
    identity: CurrentIdentity,
    uow: UoWDep,
) -> DataResponse[UserRolesResponse]:
    dto = UpdateUserRolesDTO.from_raw(user_id, body.role_ids)
    roles = await user_service.update_user_roles(dto, identity, uow)
    return DataResponse(
        message="User roles saved",
        data=UserRolesResponse.from_roles(dto.user_id, roles),
    )
