from __future__ import annotations

from datetime import timedelta

import pytest

from teamchat.application.dto.user import RegisterUserDTO
from teamchat.application.exceptions import AuthError, ConflictError, ErrorKind, ValidationError
from teamchat.domain.entities.user import User
from teamchat.domain.value_objects.enums import Role
from teamchat.infrastructure.auth.jwt_authenticator import TokenAuthenticator
from teamchat.infrastructure.auth.password import BcryptPasswordHasher
from teamchat.services import auth_service
from tests.conftest import EMPLOYEE_ID, T0, FakeClock, FakeUoW, make_user

PASSWORD = "correct horse"


@pytest.fixture
def hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def issuer() -> TokenAuthenticator:
    return TokenAuthenticator("access-secret-0123456789abcdef", "refresh-secret-0123456789abcdef")


@pytest.fixture
def uow(hasher) -> FakeUoW:
    uow = FakeUoW()
    user = make_user(EMPLOYEE_ID, "Employee")
    uow.users.add(
        type(user)(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            role=user.role,
            password_hash=hasher.hash(PASSWORD),
            created_at=user.created_at,
        )
    )
    return uow


@pytest.mark.asyncio
async def test_login_issues_pair_and_stores_refresh(uow, hasher, issuer):
    pair = await auth_service.login(
        " Employee@example.com ", PASSWORD, uow, hasher, issuer, ip_address="10.0.0.1"
    )

    identity = await issuer.verify(pair.access_token)
    assert identity.id == EMPLOYEE_ID
    assert identity.role is Role.EMPLOYEE
    assert pair.refresh_token in uow.refresh_tokens._tokens
    assert uow._committed is True


@pytest.mark.asyncio
async def test_login_wrong_password(uow, hasher, issuer):
    with pytest.raises(AuthError):
        await auth_service.login("employee@example.com", "nope", uow, hasher, issuer)


@pytest.mark.asyncio
async def test_login_unknown_email(uow, hasher, issuer):
    with pytest.raises(AuthError):
        await auth_service.login("ghost@example.com", PASSWORD, uow, hasher, issuer)


@pytest.mark.asyncio
async def test_login_requires_credentials(uow, hasher, issuer):
    with pytest.raises(ValidationError):
        await auth_service.login("", None, uow, hasher, issuer)


@pytest.mark.asyncio
async def test_refresh_rotates_token(uow, hasher, issuer):
    pair = await auth_service.login("employee@example.com", PASSWORD, uow, hasher, issuer)

    rotated = await auth_service.refresh(pair.refresh_token, uow, issuer)

    assert rotated.refresh_token != pair.refresh_token
    assert uow.refresh_tokens._tokens[pair.refresh_token].is_revoked is True
    with pytest.raises(AuthError):
        await auth_service.refresh(pair.refresh_token, uow, issuer)


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(uow, hasher, issuer):
    pair = await auth_service.login("employee@example.com", PASSWORD, uow, hasher, issuer)

    with pytest.raises(AuthError) as exc_info:
        await auth_service.refresh(pair.access_token, uow, issuer)

    assert exc_info.value.kind is ErrorKind.INVALID_TOKEN


@pytest.mark.asyncio
async def test_refresh_expired_record_is_revoked(uow, hasher, issuer):
    clock = FakeClock()
    pair = await auth_service.login(
        "employee@example.com", PASSWORD, uow, hasher, issuer, clock=clock
    )
    clock.advance(days=8)

    with pytest.raises(AuthError) as exc_info:
        await auth_service.refresh(pair.refresh_token, uow, issuer, clock=clock)

    assert exc_info.value.kind is ErrorKind.EXPIRED
    assert uow.refresh_tokens._tokens[pair.refresh_token].is_revoked is True


def test_password_hasher_round_trip(hasher):
    hashed = hasher.hash(PASSWORD)
    assert hasher.verify(PASSWORD, hashed)
    assert not hasher.verify("other", hashed)
    assert not hasher.verify(PASSWORD, "not-a-bcrypt-hash")


def test_refresh_ttl_default(issuer):
    assert issuer.refresh_ttl == timedelta(days=7)


@pytest.mark.asyncio
async def test_register_creates_employee_with_hashed_password(uow, hasher, issuer):
    dto = RegisterUserDTO.from_raw(" New@Example.com ", "s3cret", "  New Person ")

    user = await auth_service.register(dto, uow, hasher)

    assert user.email == "new@example.com"
    assert user.display_name == "New Person"
    assert user.role == "employee"
    assert hasher.verify("s3cret", user.password_hash)
    assert uow._committed

    pair = await auth_service.login("new@example.com", "s3cret", uow, hasher, issuer)
    assert (await issuer.verify(pair.access_token)).role is Role.EMPLOYEE


@pytest.mark.asyncio
async def test_register_duplicate_email(uow, hasher):
    dto = RegisterUserDTO.from_raw("employee@example.com", "whatever", "Again")

    with pytest.raises(ConflictError):
        await auth_service.register(dto, uow, hasher)


@pytest.mark.parametrize(
    ("email", "password", "display_name"),
    [
        ("", "pw", "Name"),
        ("a@example.com", "", "Name"),
        ("a@example.com", "pw", "  "),
        ("not-an-email", "pw", "Name"),
        ("a@b", "pw", "Name"),
    ],
)
def test_register_validation(email, password, display_name):
    with pytest.raises(ValidationError):
        RegisterUserDTO.from_raw(email, password, display_name)


@pytest.mark.asyncio
async def test_stored_role_is_matched_case_insensitively(hasher, issuer):
    uow = FakeUoW()
    uow.users.add(
        User(
            id=EMPLOYEE_ID,
            email="boss@example.com",
            display_name="Boss",
            role="Admin",
            password_hash=hasher.hash(PASSWORD),
            created_at=T0,
        )
    )

    pair = await auth_service.login("boss@example.com", PASSWORD, uow, hasher, issuer)

    assert (await issuer.verify(pair.access_token)).role is Role.ADMIN
