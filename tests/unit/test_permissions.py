from __future__ import annotations

from itertools import combinations

import pytest

from teamchat.application.dto.identity import Identity
from teamchat.application.exceptions import AccessDeniedError, NotFoundError
from teamchat.application.policies.permissions import (
    NO_ACCESS_REASON,
    Permission,
    assert_channel_access,
    can_access_channel,
)
from teamchat.domain.value_objects.enums import Role
from tests.conftest import (
    EMPLOYEE_ID,
    SALES_ROLE,
    SUPPORT_ROLE,
    FakeUoW,
    make_channel,
)

ROLES = [SALES_ROLE, SUPPORT_ROLE, "r-3"]


def test_admin_always_allowed(admin):
    channel = make_channel()
    for permission in Permission:
        assert can_access_channel(admin, channel, [], [], permission).allowed


def test_owner_always_allowed(owner):
    channel = make_channel()
    for permission in Permission:
        assert can_access_channel(owner, channel, [], [], permission).allowed


def test_shared_role_grants_read_and_write(employee):
    channel = make_channel()
    for permission in (Permission.READ, Permission.WRITE):
        decision = can_access_channel(employee, channel, [SALES_ROLE], [SALES_ROLE], permission)
        assert decision.allowed
        assert decision.reason is None


def test_shared_role_never_grants_admin(employee):
    decision = can_access_channel(
        employee, make_channel(), [SALES_ROLE], [SALES_ROLE], Permission.ADMIN
    )
    assert not decision.allowed
    assert decision.reason == NO_ACCESS_REASON


def test_empty_visibility_denies_non_owner(employee):
    for size in range(len(ROLES) + 1):
        for granted in combinations(ROLES, size):
            assert not can_access_channel(employee, make_channel(), granted, []).allowed


def test_channel_without_owner_is_not_owned_by_anyone():
    nobody = Identity(id="", role=Role.EMPLOYEE)
    assert not can_access_channel(nobody, make_channel(owner_id=None), [], []).allowed


def test_granting_more_roles_never_revokes_access(employee):
    visibility = [SUPPORT_ROLE]
    for size in range(len(ROLES) + 1):
        for granted in combinations(ROLES, size):
            before = can_access_channel(employee, make_channel(), granted, visibility).allowed
            for extra in ROLES:
                after = can_access_channel(
                    employee, make_channel(), [*granted, extra], visibility
                ).allowed
                assert after or not before


@pytest.mark.asyncio
async def test_assert_access_missing_channel(employee):
    with pytest.raises(NotFoundError):
        await assert_channel_access(employee, 99, FakeUoW())


@pytest.mark.asyncio
async def test_assert_access_denied_reason(employee):
    uow = FakeUoW()
    uow.channels.add(make_channel(), SALES_ROLE)

    with pytest.raises(AccessDeniedError) as exc_info:
        await assert_channel_access(employee, 7, uow)

    assert exc_info.value.reason == NO_ACCESS_REASON


@pytest.mark.asyncio
async def test_assert_access_via_role_returns_channel(employee):
    uow = FakeUoW()
    uow.channels.add(make_channel(), SALES_ROLE)
    uow.roles._user_roles[EMPLOYEE_ID] = [SALES_ROLE]

    channel = await assert_channel_access(employee, 7, uow, Permission.WRITE)

    assert channel.id == 7


@pytest.mark.asyncio
async def test_assert_access_skips_role_lookup_for_owner(owner):
    uow = FakeUoW()
    uow.channels.add(make_channel())

    await assert_channel_access(owner, 7, uow, Permission.ADMIN)

    assert uow.roles.calls == 0
