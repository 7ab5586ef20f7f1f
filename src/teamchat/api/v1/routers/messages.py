from __future__ import annotations

from fastapi import APIRouter

from teamchat.api.deps import CurrentIdentity, DispatcherDep, PublisherDep, UoWDep
from teamchat.api.v1.schemas.common import DataResponse
from teamchat.api.v1.schemas.message import (
    MarkReadRequest,
    MarkReadResponse,
    MessageResponse,
    PostMessageRequest,
)
from teamchat.application.dto.message import MarkReadDTO, PostMessageDTO
from teamchat.services import message_service

router = APIRouter(prefix="/api/v1/messages", tags=["messages"])


@router.get("/{channel_id}", response_model=DataResponse[list[MessageResponse]])
async def fetch_messages(
    channel_id: str,
    identity: CurrentIdentity,
    uow: UoWDep,
    publisher: PublisherDep,
) -> DataResponse[list[MessageResponse]]:
    views = await message_service.fetch_messages(channel_id, identity, uow, publisher)
    return DataResponse(
        message="Messages fetched",
        data=[MessageResponse.from_view(v) for v in views],
    )


@router.post("", response_model=DataResponse[MessageResponse], status_code=201)
async def post_message(
    body: PostMessageRequest,
    identity: CurrentIdentity,
    uow: UoWDep,
    publisher: PublisherDep,
    dispatcher: DispatcherDep,
) -> DataResponse[MessageResponse]:
    dto = PostMessageDTO.from_raw(body.channel_id, body.content, body.type)
    view = await message_service.post_message(dto, identity, uow, publisher, dispatcher)
    return DataResponse(message="Message sent", data=MessageResponse.from_view(view))


@router.post("/{channel_id}/read", response_model=DataResponse[MarkReadResponse])
async def mark_read(
    channel_id: str,
    identity: CurrentIdentity,
    uow: UoWDep,
    publisher: PublisherDep,
    body: MarkReadRequest | None = None,
) -> DataResponse[MarkReadResponse]:
    dto = MarkReadDTO.from_raw(channel_id, body.message_ids if body else None)
    marked = await message_service.mark_read(dto, identity, uow, publisher)
    return DataResponse(message="Messages marked as read", data=MarkReadResponse(message_ids=marked))
