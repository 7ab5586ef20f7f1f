from __future__ import annotations

from teamchat.application.dto.identity import Identity
from teamchat.application.dto.role import CreateRoleDTO
from teamchat.application.exceptions import ConflictError
from teamchat.application.policies.permissions import assert_admin
from teamchat.application.uow import UnitOfWork
from teamchat.domain.entities.user import Role
from teamchat.services._boundary import service_boundary


@service_boundary
async def list_roles(uow: UnitOfWork) -> list[Role]:
    return await uow.roles.list_all()


@service_boundary
async def create_role(dto: CreateRoleDTO, identity: Identity, uow: UnitOfWork) -> Role:
    assert_admin(identity)
    if await uow.roles.get_by_name(dto.name) is not None:
        raise ConflictError("Role name already exists")

    role = await uow.roles_w.create(dto.name)
    await uow.commit()
    return role
