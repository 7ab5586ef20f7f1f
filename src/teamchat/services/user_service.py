from __future__ import annotations

import logging

from teamchat.application.dto.identity import Identity
from teamchat.application.dto.user import UpdateUserRolesDTO
from teamchat.application.exceptions import InvalidRoleIdsError, NotFoundError
from teamchat.application.policies.permissions import assert_admin
from teamchat.application.uow import UnitOfWork
from teamchat.domain.entities.user import Role, User
from teamchat.services._boundary import service_boundary

logger = logging.getLogger(__name__)


async def _require_user(uow: UnitOfWork, user_id: str) -> User:
    user = await uow.users.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


@service_boundary
async def list_users(identity: Identity, uow: UnitOfWork) -> list[User]:
    assert_admin(identity)
    return await uow.users.list_all()


@service_boundary
async def get_user_roles(user_id: str, identity: Identity, uow: UnitOfWork) -> list[Role]:
    assert_admin(identity)
    await _require_user(uow, user_id)
    return await uow.roles.list_for_user(user_id)


@service_boundary
async def update_user_roles(
    dto: UpdateUserRolesDTO,
    identity: Identity,
    uow: UnitOfWork,
) -> list[Role]:
    """Replace the user's role set. Unknown role ids reject the whole update.

    The new set decides which channels the user can see through role
    visibility on the next access check.
    """
    assert_admin(identity)
    await _require_user(uow, dto.user_id)

    existing = await uow.roles.existing_ids(dto.role_ids)
    invalid = [rid for rid in dto.role_ids if rid not in existing]
    if invalid:
        raise InvalidRoleIdsError(invalid)

    await uow.roles_w.replace_for_user(dto.user_id, dto.role_ids)
    await uow.commit()
    logger.info("Roles of user %s set to %s by %s", dto.user_id, list(dto.role_ids), identity.id)
    return await uow.roles.list_for_user(dto.user_id)
