from __future__ import annotations

from teamchat.domain.entities.user import Role, User
from teamchat.infrastructure.db.models.user import RoleModel, UserModel


def model_to_entity(model: UserModel) -> User:
    return User(
        id=model.id,
        email=model.email,
        display_name=model.display_name,
        role=model.role,
        password_hash=model.password_hash,
        created_at=model.created_at,
    )


def role_to_entity(model: RoleModel) -> Role:
    return Role(id=model.id, name=model.name, created_at=model.created_at)
