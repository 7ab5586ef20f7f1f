from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from teamchat.domain.entities.user import User
from teamchat.domain.value_objects.enums import Role


@dataclass(frozen=True, slots=True)
class NewUser:
    email: str
    display_name: str
    password_hash: str
    role: str = Role.EMPLOYEE.value


class UserReader(Protocol):
    async def get_by_id(self, user_id: str) -> User | None: ...

    async def get_by_email(self, email: str) -> User | None: ...

    async def list_all(self) -> list[User]:
        """Newest first."""
        ...


class UserWriter(Protocol):
    async def create(self, user: NewUser) -> User: ...
