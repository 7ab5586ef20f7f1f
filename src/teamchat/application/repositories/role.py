from __future__ import annotations

from typing import Protocol, Sequence

from teamchat.domain.entities.user import Role


class RoleReader(Protocol):
    async def list_role_ids_for_user(self, user_id: str) -> list[str]: ...

    async def list_for_user(self, user_id: str) -> list[Role]: ...

    async def list_all(self) -> list[Role]: ...

    async def get_by_name(self, name: str) -> Role | None: ...

    async def existing_ids(self, role_ids: Sequence[str]) -> set[str]: ...


class RoleWriter(Protocol):
    async def create(self, name: str) -> Role: ...

    async def replace_for_user(self, user_id: str, role_ids: Sequence[str]) -> None:
        """Make ``role_ids`` the user's complete role set."""
        ...
