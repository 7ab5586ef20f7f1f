from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Collection

from teamchat.application.dto.identity import Identity
from teamchat.application.exceptions import AccessDeniedError, NotFoundError
from teamchat.application.uow import UnitOfWork
from teamchat.domain.entities.channel import Channel

NO_ACCESS_REASON = "no access to this channel"


class Permission(StrEnum):
    READ = "read"
    WRITE = "write"
    ADMIN = "admin"


@dataclass(frozen=True, slots=True)
class AccessDecision:
    allowed: bool
    reason: str | None = None


_ALLOW = AccessDecision(allowed=True)
_DENY = AccessDecision(allowed=False, reason=NO_ACCESS_REASON)


def _decided_without_roles(identity: Identity, channel: Channel) -> bool:
    return identity.is_admin or (
        channel.owner_id is not None and channel.owner_id == identity.id
    )


def can_access_channel(
    identity: Identity,
    channel: Channel,
    user_role_ids: Collection[str],
    visibility_role_ids: Collection[str],
    permission: Permission = Permission.READ,
) -> AccessDecision:
    """Decide whether ``identity`` may use ``channel`` at the given level.

    Admins and the channel owner always pass. Anyone else passes READ and
    WRITE when one of their roles is in the channel's visibility set, and
    never passes ADMIN.
    """
    if _decided_without_roles(identity, channel):
        return _ALLOW
    if permission == Permission.ADMIN:
        return _DENY
    if set(user_role_ids) & set(visibility_role_ids):
        return _ALLOW
    return _DENY


async def assert_channel_access(
    identity: Identity,
    channel_id: int,
    uow: UnitOfWork,
    permission: Permission = Permission.READ,
) -> Channel:
    """Raise if the channel doesn't exist or ``identity`` has no access."""
    channel = await uow.channels.get_by_id(channel_id)
    if channel is None:
        raise NotFoundError("Channel not found")

    role_ids: list[str] = []
    visibility: list[str] = []
    if permission != Permission.ADMIN and not _decided_without_roles(identity, channel):
        role_ids = await uow.roles.list_role_ids_for_user(identity.id)
        if role_ids:
            visibility = await uow.channels.list_visibility_role_ids(channel.id)

    decision = can_access_channel(identity, channel, role_ids, visibility, permission)
    if not decision.allowed:
        raise AccessDeniedError(decision.reason or NO_ACCESS_REASON)
    return channel


def assert_admin(identity: Identity) -> None:
    if not identity.is_admin:
        raise AccessDeniedError("Admin access required")
