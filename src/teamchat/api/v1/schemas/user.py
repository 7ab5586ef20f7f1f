from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from teamchat.api.v1.schemas.role import RoleResponse
from teamchat.domain.entities.user import Role


class UpdateUserRolesRequest(BaseModel):
    role_ids: Any = None


class UserRolesResponse(BaseModel):
    user_id: str
    role_ids: list[str]
    roles: list[RoleResponse]

    @classmethod
    def from_roles(cls, user_id: str, roles: list[Role]) -> UserRolesResponse:
        return cls(
            user_id=user_id,
            role_ids=[r.id for r in roles],
            roles=[RoleResponse.model_validate(r) for r in roles],
        )
