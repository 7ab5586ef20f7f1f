from __future__ import annotations

from typing import Protocol, Sequence

from teamchat.application.dto.channel import CreateChannelDTO
from teamchat.domain.entities.channel import Channel


class ChannelReader(Protocol):
    async def get_by_id(self, channel_id: int) -> Channel | None: ...

    async def get_by_name(self, name: str) -> Channel | None: ...

    async def list_active(self) -> list[Channel]: ...

    async def list_accessible(
        self, user_id: str, role_ids: Sequence[str]
    ) -> list[Channel]:
        """Active channels the user owns or that one of ``role_ids`` can see."""
        ...

    async def list_visibility_role_ids(self, channel_id: int) -> list[str]: ...


class ChannelWriter(Protocol):
    async def create(self, data: CreateChannelDTO) -> Channel: ...

    async def replace_visibility(
        self, channel_id: int, role_ids: Sequence[str]
    ) -> None: ...
