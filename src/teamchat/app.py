from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx
import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from teamchat.api.middleware.correlation_id import CorrelationIdMiddleware
from teamchat.api.middleware.metrics import RequestTimingMiddleware
from teamchat.api.v1.routers import (
    auth,
    channels,
    health,
    messages,
    roles,
    users,
    webhooks,
    ws,
)
from teamchat.application.exceptions import AppError, InvalidRoleIdsError
from teamchat.config import settings
from teamchat.infrastructure.bus.redis_pubsub import RedisRelayPublisher, RedisRelaySubscriber
from teamchat.infrastructure.webhooks.dispatcher import HttpWebhookDispatcher
from teamchat.infrastructure.ws.broadcaster import Broadcaster
from teamchat.infrastructure.ws.registry import ChannelRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    broadcaster: Broadcaster = app.state.broadcaster
    subscriber: RedisRelaySubscriber | None = None

    if settings.REALTIME_RELAY == "redis":
        app.state.redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
        logger.info("Redis connection pool created")
        app.state.publisher = RedisRelayPublisher(app.state.redis, settings.REDIS_PUBSUB_CHANNEL)
        subscriber = RedisRelaySubscriber(
            app.state.redis,
            settings.REDIS_PUBSUB_CHANNEL,
            broadcaster.fan_out,
        )
        await subscriber.start()

    app.state.webhook_dispatcher = HttpWebhookDispatcher(
        httpx.AsyncClient(timeout=settings.WEBHOOK_TIMEOUT_SECONDS)
    )

    yield

    await app.state.registry.close_all(1001)
    if subscriber is not None:
        await subscriber.stop()
    await app.state.webhook_dispatcher.aclose()
    if settings.REALTIME_RELAY == "redis":
        await app.state.redis.aclose()
        logger.info("Redis connection pool closed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Teamchat",
        version="0.1.0",
        lifespan=lifespan,
    )

    registry = ChannelRegistry()
    broadcaster = Broadcaster(registry)
    app.state.registry = registry
    app.state.broadcaster = broadcaster
    app.state.publisher = broadcaster

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(roles.router)
    app.include_router(channels.router)
    app.include_router(messages.router)
    app.include_router(webhooks.router)
    app.include_router(ws.router)

    return app


def _error_body(exc: AppError) -> dict[str, Any]:
    body: dict[str, Any] = {"detail": exc.detail}
    if exc.kind is not None:
        body["kind"] = exc.kind.value
    return body


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(InvalidRoleIdsError)
    async def _invalid_roles(_req: Request, exc: InvalidRoleIdsError) -> JSONResponse:
        body = _error_body(exc)
        body["invalid_role_ids"] = exc.invalid_role_ids
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(AppError)
    async def _app_error(_req: Request, exc: AppError) -> JSONResponse:
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc), headers=headers)
