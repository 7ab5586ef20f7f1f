from __future__ import annotations

import logging
from typing import Any

from teamchat.application.dto.auth import TokenPair
from teamchat.application.dto.identity import Identity
from teamchat.application.dto._parse import clean_str
from teamchat.application.dto.user import RegisterUserDTO
from teamchat.application.exceptions import AuthError, ConflictError, ErrorKind, ValidationError
from teamchat.application.ports.auth import PasswordHasher, TokenIssuer
from teamchat.application.ports.clock import Clock, SystemClock, deadline
from teamchat.application.repositories.user import NewUser
from teamchat.application.uow import UnitOfWork
from teamchat.domain.entities.user import User
from teamchat.domain.value_objects.enums import Role
from teamchat.services._boundary import service_boundary

logger = logging.getLogger(__name__)


def _identity_for(user: User) -> Identity:
    return Identity(id=user.id, role=Role.from_claim(user.role), email=user.email)


async def _issue_pair(
    user: User,
    uow: UnitOfWork,
    issuer: TokenIssuer,
    clock: Clock,
    ip_address: str | None,
    user_agent: str | None,
) -> TokenPair:
    access = issuer.issue_access(_identity_for(user))
    refresh = issuer.issue_refresh(user.id)
    await uow.refresh_tokens.add(
        user.id,
        refresh,
        deadline(clock, issuer.refresh_ttl),
        ip_address=ip_address,
        user_agent=user_agent,
    )
    return TokenPair(user=user, access_token=access, refresh_token=refresh)


@service_boundary
async def login(
    email: Any,
    password: Any,
    uow: UnitOfWork,
    hasher: PasswordHasher,
    issuer: TokenIssuer,
    *,
    ip_address: str | None = None,
    user_agent: str | None = None,
    clock: Clock | None = None,
) -> TokenPair:
    clock = clock or SystemClock()
    address = clean_str(email).lower()
    secret = password if isinstance(password, str) else ""
    if not address or not secret:
        raise ValidationError("email and password are required")

    user = await uow.users.get_by_email(address)
    if user is None or not hasher.verify(secret, user.password_hash):
        raise AuthError("Invalid email or password")

    pair = await _issue_pair(user, uow, issuer, clock, ip_address, user_agent)
    await uow.commit()
    logger.info("User %s logged in", user.id)
    return pair


@service_boundary
async def refresh(
    token: Any,
    uow: UnitOfWork,
    issuer: TokenIssuer,
    *,
    ip_address: str | None = None,
    user_agent: str | None = None,
    clock: Clock | None = None,
) -> TokenPair:
    """Rotate a refresh token: the presented one is revoked, a new pair issued."""
    clock = clock or SystemClock()
    raw = clean_str(token)
    if not raw:
        raise ValidationError("refresh_token is required")

    user_id = await issuer.verify_refresh(raw)
    stored = await uow.refresh_tokens.find_active(raw)
    if stored is None or stored.user_id != user_id:
        raise AuthError("Invalid refresh token", kind=ErrorKind.INVALID_TOKEN)
    if stored.expires_at <= clock.now():
        await uow.refresh_tokens.revoke(raw)
        await uow.commit()
        raise AuthError("Refresh token expired", kind=ErrorKind.EXPIRED)

    user = await uow.users.get_by_id(user_id)
    if user is None:
        raise AuthError("Invalid refresh token", kind=ErrorKind.INVALID_TOKEN)

    await uow.refresh_tokens.revoke(raw)
    pair = await _issue_pair(user, uow, issuer, clock, ip_address, user_agent)
    await uow.commit()
    return pair


@service_boundary
async def register(
    dto: RegisterUserDTO,
    uow: UnitOfWork,
    hasher: PasswordHasher,
) -> User:
    """Create an employee account. Admin rights are never granted here."""
    if await uow.users.get_by_email(dto.email) is not None:
        raise ConflictError("Email already registered")

    user = await uow.users_w.create(
        NewUser(
            email=dto.email,
            display_name=dto.display_name,
            password_hash=hasher.hash(dto.password),
        )
    )
    await uow.commit()
    logger.info("User %s registered", user.id)
    return user
