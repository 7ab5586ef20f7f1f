from __future__ import annotations

from fastapi import APIRouter

from teamchat.api.deps import CurrentIdentity, UoWDep
from teamchat.api.v1.schemas.channel import (
    ChannelResponse,
    ChannelSummaryResponse,
    CreateChannelRequest,
    RoleVisibilityResponse,
    UpdateChannelRolesRequest,
)
from teamchat.api.v1.schemas.common import DataResponse
from teamchat.application.dto.channel import CreateChannelDTO, UpdateChannelRolesDTO
from teamchat.services import channel_service

router = APIRouter(prefix="/api/v1/channels", tags=["channels"])


@router.get("", response_model=DataResponse[list[ChannelSummaryResponse]])
async def list_channels(
    identity: CurrentIdentity,
    uow: UoWDep,
) -> DataResponse[list[ChannelSummaryResponse]]:
    summaries = await channel_service.list_channels(identity, uow)
    return DataResponse(
        message="Channels fetched",
        data=[ChannelSummaryResponse.from_summary(s) for s in summaries],
    )


@router.post("", response_model=DataResponse[ChannelResponse], status_code=201)
async def create_channel(
    body: CreateChannelRequest,
    identity: CurrentIdentity,
    uow: UoWDep,
) -> DataResponse[ChannelResponse]:
    dto = CreateChannelDTO.from_raw(
        body.name, body.icon_codepoint, body.icon_color, body.created_by
    )
    channel = await channel_service.create_channel(dto, identity, uow)
    return DataResponse(message="Channel created", data=ChannelResponse.from_entity(channel))


@router.get("/{channel_id}/roles", response_model=DataResponse[list[RoleVisibilityResponse]])
async def get_channel_roles(
    channel_id: str,
    identity: CurrentIdentity,
    uow: UoWDep,
) -> DataResponse[list[RoleVisibilityResponse]]:
    views = await channel_service.get_channel_roles(channel_id, identity, uow)
    return DataResponse(
        message="Role visibility fetched",
        data=[RoleVisibilityResponse.model_validate(v) for v in views],
    )


@router.put("/{channel_id}/roles", response_model=DataResponse[list[RoleVisibilityResponse]])
async def update_channel_roles(
    channel_id: str,
    body: UpdateChannelRolesRequest,
    identity: CurrentIdentity,
    uow: UoWDep,
) -> DataResponse[list[RoleVisibilityResponse]]:
    dto = UpdateChannelRolesDTO.from_raw(channel_id, body.role_ids)
    views = await channel_service.update_channel_roles(dto, identity, uow)
    return DataResponse(
        message="Role visibility saved",
        data=[RoleVisibilityResponse.model_validate(v) for v in views],
    )
