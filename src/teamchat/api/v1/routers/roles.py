from __future__ import annotations

from fastapi import APIRouter

from teamchat.api.deps import CurrentIdentity, UoWDep
from teamchat.api.v1.schemas.common import DataResponse
from teamchat.api.v1.schemas.role import CreateRoleRequest, RoleResponse
from teamchat.application.dto.role import CreateRoleDTO
from teamchat.services import role_service

router = APIRouter(prefix="/api/v1/roles", tags=["roles"])


@router.get("", response_model=DataResponse[list[RoleResponse]])
async def list_roles(
    _identity: CurrentIdentity,
    uow: UoWDep,
) -> DataResponse[list[RoleResponse]]:
    roles = await role_service.list_roles(uow)
    return DataResponse(
        message="Roles fetched",
        data=[RoleResponse.model_validate(r) for r in roles],
    )


@router.post("/create", response_model=DataResponse[RoleResponse], status_code=201)
async def create_role(
    body: CreateRoleRequest,
    identity: CurrentIdentity,
    uow: UoWDep,
) -> DataResponse[RoleResponse]:
    dto = CreateRoleDTO.from_raw(body.name)
    role = await role_service.create_role(dto, identity, uow)
    return DataResponse(message="Role created", data=RoleResponse.model_validate(role))
