from __future__ import annotations

import dataclasses
from typing import Any

from teamchat.application.dto.channel import (
    ChannelSummary,
    CreateChannelDTO,
    RoleVisibilityView,
    UpdateChannelRolesDTO,
)
from teamchat.application.dto.identity import Identity
from teamchat.application.dto._parse import parse_int
from teamchat.application.exceptions import ConflictError, InvalidRoleIdsError, NotFoundError
from teamchat.application.policies.permissions import Permission, assert_channel_access
from teamchat.application.uow import UnitOfWork
from teamchat.domain.entities.channel import Channel
from teamchat.services._boundary import service_boundary


@service_boundary
async def list_channels(identity: Identity, uow: UnitOfWork) -> list[ChannelSummary]:
    """Channels the caller can see, each with its last message and unread count."""
    if identity.is_admin:
        channels = await uow.channels.list_active()
    else:
        role_ids = await uow.roles.list_role_ids_for_user(identity.id)
        channels = await uow.channels.list_accessible(identity.id, role_ids)

    summaries: list[ChannelSummary] = []
    for channel in channels:
        last = await uow.messages.last_for_channel(channel.id)
        unread = await uow.messages.count_unread(channel.id, identity.id)
        summaries.append(
            ChannelSummary(
                channel=channel,
                last_message_content=last.content if last else None,
                last_message_at=last.created_at if last else None,
                unread_count=unread,
            )
        )
    return summaries


@service_boundary
async def create_channel(
    dto: CreateChannelDTO,
    identity: Identity,
    uow: UnitOfWork,
) -> Channel:
    if dto.created_by is None:
        dto = dataclasses.replace(dto, created_by=identity.id)
    elif await uow.users.get_by_id(dto.created_by) is None:
        raise NotFoundError("Creator not found")

    if await uow.channels.get_by_name(dto.name) is not None:
        raise ConflictError("Channel name already exists")

    channel = await uow.channels_w.create(dto)
    await uow.commit()
    return channel


async def _visibility_views(uow: UnitOfWork, channel_id: int) -> list[RoleVisibilityView]:
    roles = await uow.roles.list_all()
    allowed = set(await uow.channels.list_visibility_role_ids(channel_id))
    return [
        RoleVisibilityView(id=r.id, name=r.name, has_access=r.id in allowed)
        for r in roles
    ]


@service_boundary
async def get_channel_roles(
    channel_id: Any,
    identity: Identity,
    uow: UnitOfWork,
) -> list[RoleVisibilityView]:
    cid = parse_int(channel_id, "channel_id")
    await assert_channel_access(identity, cid, uow, Permission.ADMIN)
    return await _visibility_views(uow, cid)


@service_boundary
async def update_channel_roles(
    dto: UpdateChannelRolesDTO,
    identity: Identity,
    uow: UnitOfWork,
) -> list[RoleVisibilityView]:
    """Replace the channel's visibility set. Unknown role ids reject the whole update."""
    await assert_channel_access(identity, dto.channel_id, uow, Permission.ADMIN)

    existing = await uow.roles.existing_ids(dto.role_ids)
    invalid = [rid for rid in dto.role_ids if rid not in existing]
    if invalid:
        raise InvalidRoleIdsError(invalid)

    await uow.channels_w.replace_visibility(dto.channel_id, dto.role_ids)
    await uow.commit()
    return await _visibility_views(uow, dto.channel_id)
