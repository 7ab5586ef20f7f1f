"""FastAPI dependency injection helpers."""
from __future__ import annotations

from datetime import timedelta
from typing import Annotated, AsyncIterator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from teamchat.application.dto.identity import Identity
from teamchat.application.exceptions import AuthError
from teamchat.application.ports.auth import PasswordHasher
from teamchat.application.ports.realtime import RealtimePublisher
from teamchat.application.ports.webhooks import OutboundWebhookDispatcher
from teamchat.config import settings
from teamchat.infrastructure.auth.jwt_authenticator import TokenAuthenticator
from teamchat.infrastructure.auth.password import BcryptPasswordHasher
from teamchat.infrastructure.db.session import AsyncSessionLocal
from teamchat.infrastructure.db.uow import SqlAlchemyUoW

_bearer_scheme = HTTPBearer(auto_error=False)


async def get_uow() -> AsyncIterator[SqlAlchemyUoW]:
    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)
        try:
            yield uow
        finally:
            await session.close()


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]


_authenticator: TokenAuthenticator | None = None


def get_authenticator() -> TokenAuthenticator:
    global _authenticator  # noqa: PLW0603
    if _authenticator is None:
        _authenticator = TokenAuthenticator(
            settings.JWT_SECRET,
            settings.JWT_REFRESH_SECRET,
            settings.JWT_ALGORITHM,
            access_ttl=timedelta(minutes=settings.ACCESS_TOKEN_TTL_MINUTES),
            refresh_ttl=timedelta(days=settings.REFRESH_TOKEN_TTL_DAYS),
        )
    return _authenticator


AuthenticatorDep = Annotated[TokenAuthenticator, Depends(get_authenticator)]


def get_password_hasher() -> PasswordHasher:
    return BcryptPasswordHasher()


PasswordHasherDep = Annotated[PasswordHasher, Depends(get_password_hasher)]


def get_publisher(request: Request) -> RealtimePublisher:
    return request.app.state.publisher


PublisherDep = Annotated[RealtimePublisher, Depends(get_publisher)]


def get_dispatcher(request: Request) -> OutboundWebhookDispatcher | None:
    return getattr(request.app.state, "webhook_dispatcher", None)


DispatcherDep = Annotated[OutboundWebhookDispatcher | None, Depends(get_dispatcher)]


async def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
    authenticator: AuthenticatorDep,
) -> Identity:
    if credentials is None or not credentials.credentials:
        raise AuthError("Missing bearer token")
    return await authenticator.verify(credentials.credentials)


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
