"""Seed development data: roles, two users, a channel and a few messages."""
from __future__ import annotations

import asyncio
import logging

from teamchat.infrastructure.auth.password import BcryptPasswordHasher
from teamchat.infrastructure.db.base import Base
from teamchat.infrastructure.db.models import (
    ChannelModel,
    ChannelRoleVisibilityModel,
    MessageModel,
    RoleModel,
    UserModel,
    UserRoleModel,
    WebhookSubscriptionModel,
)
from teamchat.infrastructure.db.session import AsyncSessionLocal, engine

logger = logging.getLogger(__name__)

DEV_PASSWORD = "password123"


async def seed() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    hasher = BcryptPasswordHasher()
    async with AsyncSessionLocal() as session:
        sales = RoleModel(name="sales")
        support = RoleModel(name="support")
        admin = UserModel(
            email="admin@example.com",
            display_name="Admin",
            password_hash=hasher.hash(DEV_PASSWORD),
            role="admin",
        )
        employee = UserModel(
            email="employee@example.com",
            display_name="Employee",
            password_hash=hasher.hash(DEV_PASSWORD),
        )
        session.add_all([sales, support, admin, employee])
        await session.flush()

        session.add(UserRoleModel(user_id=employee.id, role_id=sales.id))
        channel = ChannelModel(name="general", created_by=admin.id, icon_color="4CAF50")
        session.add(channel)
        await session.flush()

        session.add(ChannelRoleVisibilityModel(channel_id=channel.id, role_id=sales.id))
        session.add(
            WebhookSubscriptionModel(
                channel_id=channel.id, url="internal", secret_token="dev-secret"
            )
        )
        for sender, content in [
            (admin.id, "Welcome to #general"),
            (employee.id, "Hi everyone"),
        ]:
            session.add(MessageModel(channel_id=channel.id, content=content, sender_id=sender))

        await session.commit()
        logger.info("Seeded channel %s with users %s, %s", channel.id, admin.email, employee.email)


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())


if __name__ == "__main__":
    main()
