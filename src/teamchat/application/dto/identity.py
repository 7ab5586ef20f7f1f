from __future__ import annotations

from dataclasses import dataclass

from teamchat.domain.value_objects.enums import Role
from teamchat.domain.value_objects.ids import UserId


@dataclass(frozen=True, slots=True)
class Identity:
    """Authenticated caller identity extracted from an access token."""

    id: UserId
    role: Role = Role.EMPLOYEE
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
