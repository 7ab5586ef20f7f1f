"""Shared test fixtures."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Sequence

import pytest

from teamchat.application.dto.channel import CreateChannelDTO
from teamchat.application.dto.identity import Identity
from teamchat.application.dto.webhook import CreateWebhookDTO
from teamchat.application.repositories.message import MessageRecord, NewMessage
from teamchat.application.repositories.user import NewUser
from teamchat.domain.entities.channel import Channel
from teamchat.domain.entities.message import Message
from teamchat.domain.entities.read_receipt import ReadReceipt
from teamchat.domain.entities.refresh_token import RefreshToken
from teamchat.domain.entities.user import Role as RoleEntity
from teamchat.domain.entities.user import User
from teamchat.domain.entities.webhook import WebhookSubscription
from teamchat.domain.value_objects.enums import MessageType, RealtimeEvent, Role

OWNER_ID = "00000000-0000-0000-0000-0000000000aa"
EMPLOYEE_ID = "00000000-0000-0000-0000-0000000000bb"
ADMIN_ID = "00000000-0000-0000-0000-0000000000cc"
SALES_ROLE = "00000000-0000-0000-0000-000000000001"
SUPPORT_ROLE = "00000000-0000-0000-0000-000000000002"

T0 = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def employee() -> Identity:
    return Identity(id=EMPLOYEE_ID, role=Role.EMPLOYEE, email="employee@example.com")


@pytest.fixture
def owner() -> Identity:
    return Identity(id=OWNER_ID, role=Role.EMPLOYEE, email="owner@example.com")


@pytest.fixture
def admin() -> Identity:
    return Identity(id=ADMIN_ID, role=Role.ADMIN, email="admin@example.com")


def make_channel(
    *,
    channel_id: int = 7,
    name: str = "general",
    owner_id: str | None = OWNER_ID,
    is_active: bool = True,
) -> Channel:
    return Channel(
        id=channel_id,
        name=name,
        owner_id=owner_id,
        is_active=is_active,
        icon_codepoint=None,
        icon_color=None,
        created_at=T0,
        updated_at=T0,
    )


def make_user(user_id: str, display_name: str, *, role: str = "employee") -> User:
    return User(
        id=user_id,
        email=f"{display_name.lower()}@example.com",
        display_name=display_name,
        role=role,
        password_hash="",
        created_at=T0,
    )


@dataclass
class FakeClock:
    current: datetime = T0

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


@dataclass
class FakeChannelReader:
    _store: dict[int, Channel] = field(default_factory=dict)
    _visibility: dict[int, set[str]] = field(default_factory=dict)

    def add(self, channel: Channel, *role_ids: str) -> Channel:
        self._store[channel.id] = channel
        if role_ids:
            self._visibility[channel.id] = set(role_ids)
        return channel

    async def get_by_id(self, channel_id: int) -> Channel | None:
        return self._store.get(channel_id)

    async def get_by_name(self, name: str) -> Channel | None:
        return next((c for c in self._store.values() if c.name == name), None)

    async def list_active(self) -> list[Channel]:
        return [c for c in self._store.values() if c.is_active]

    async def list_accessible(self, user_id: str, role_ids: Sequence[str]) -> list[Channel]:
        return [
            c
            for c in self._store.values()
            if c.is_active
            and (c.owner_id == user_id or self._visibility.get(c.id, set()) & set(role_ids))
        ]

    async def list_visibility_role_ids(self, channel_id: int) -> list[str]:
        return sorted(self._visibility.get(channel_id, set()))


@dataclass
class FakeChannelWriter:
    _reader: FakeChannelReader

    async def create(self, data: CreateChannelDTO) -> Channel:
        channel = Channel(
            id=max(self._reader._store, default=0) + 1,
            name=data.name,
            owner_id=data.created_by,
            is_active=True,
            icon_codepoint=data.icon_codepoint,
            icon_color=data.icon_color,
            created_at=T0,
            updated_at=T0,
        )
        self._reader._store[channel.id] = channel
        return channel

    async def replace_visibility(self, channel_id: int, role_ids: Sequence[str]) -> None:
        self._reader._visibility[channel_id] = set(role_ids)


@dataclass
class FakeRoleReader:
    _roles: dict[str, str] = field(
        default_factory=lambda: {SALES_ROLE: "sales", SUPPORT_ROLE: "support"}
    )
    _user_roles: dict[str, list[str]] = field(default_factory=dict)
    calls: int = 0

    async def list_role_ids_for_user(self, user_id: str) -> list[str]:
        self.calls += 1
        return list(self._user_roles.get(user_id, []))

    async def list_for_user(self, user_id: str) -> list[RoleEntity]:
        owned = set(self._user_roles.get(user_id, []))
        return [r for r in await self.list_all() if r.id in owned]

    async def list_all(self) -> list[RoleEntity]:
        return [RoleEntity(id=rid, name=name) for rid, name in sorted(self._roles.items(), key=lambda i: i[1])]

    async def get_by_name(self, name: str) -> RoleEntity | None:
        return next((r for r in await self.list_all() if r.name == name), None)

    async def existing_ids(self, role_ids: Sequence[str]) -> set[str]:
        return {rid for rid in role_ids if rid in self._roles}


@dataclass
class FakeRoleWriter:
    _reader: FakeRoleReader

    async def create(self, name: str) -> RoleEntity:
        role_id = f"00000000-0000-0000-0000-{len(self._reader._roles) + 1:012d}"
        self._reader._roles[role_id] = name
        return RoleEntity(id=role_id, name=name, created_at=T0)

    async def replace_for_user(self, user_id: str, role_ids: Sequence[str]) -> None:
        self._reader._user_roles[user_id] = list(role_ids)


@dataclass
class FakeUserReader:
    _users: dict[str, User] = field(default_factory=dict)

    def add(self, user: User) -> User:
        self._users[user.id] = user
        return user

    async def get_by_id(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    async def get_by_email(self, email: str) -> User | None:
        return next((u for u in self._users.values() if u.email == email), None)

    async def list_all(self) -> list[User]:
        return sorted(self._users.values(), key=lambda u: (u.created_at, u.email), reverse=True)


@dataclass
class FakeUserWriter:
    _reader: FakeUserReader

    async def create(self, user: NewUser) -> User:
        created = User(
            id=f"00000000-0000-0000-0001-{len(self._reader._users) + 1:012d}",
            email=user.email,
            display_name=user.display_name,
            role=user.role,
            password_hash=user.password_hash,
            created_at=T0,
        )
        return self._reader.add(created)


@dataclass
class FakeMessageReader:
    _users: FakeUserReader
    _messages: list[Message] = field(default_factory=list)
    _receipts: dict[tuple[int, str], datetime] = field(default_factory=dict)

    def add(self, message: Message) -> Message:
        self._messages.append(message)
        return message

    def _record(self, message: Message) -> MessageRecord:
        sender = self._users._users.get(message.sender_id or "")
        readers = sorted(
            ((at, uid) for (mid, uid), at in self._receipts.items() if mid == message.id),
        )
        return MessageRecord(
            message=message,
            sender_name=sender.display_name if sender else None,
            read_by=tuple(uid for _, uid in readers),
        )

    def _timeline(self, channel_id: int) -> list[Message]:
        return sorted(
            (m for m in self._messages if m.channel_id == channel_id),
            key=lambda m: (m.created_at, m.id),
        )

    async def list_for_channel(self, channel_id: int) -> list[MessageRecord]:
        return [self._record(m) for m in self._timeline(channel_id)]

    async def get_record(self, message_id: int) -> MessageRecord | None:
        message = next((m for m in self._messages if m.id == message_id), None)
        return self._record(message) if message else None

    async def find_unread_ids(
        self,
        channel_id: int,
        user_id: str,
        message_ids: Sequence[int] | None = None,
    ) -> list[int]:
        return [
            m.id
            for m in self._timeline(channel_id)
            if m.sender_id != user_id
            and (m.id, user_id) not in self._receipts
            and (not message_ids or m.id in message_ids)
        ]

    async def last_for_channel(self, channel_id: int) -> Message | None:
        timeline = self._timeline(channel_id)
        return timeline[-1] if timeline else None

    async def count_unread(self, channel_id: int, user_id: str) -> int:
        return len(await self.find_unread_ids(channel_id, user_id))


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader
    clock: FakeClock = field(default_factory=FakeClock)

    async def create(
        self,
        message: NewMessage,
        *,
        read_by: str | None = None,
        read_at: datetime | None = None,
    ) -> Message:
        created = Message(
            id=max((m.id for m in self._reader._messages), default=0) + 1,
            channel_id=message.channel_id,
            type=message.type,
            content=message.content,
            sender_id=message.sender_id,
            image_url=message.image_url,
            created_at=self.clock.now(),
        )
        self._reader._messages.append(created)
        if read_by is not None:
            self._reader._receipts.setdefault((created.id, read_by), read_at or self.clock.now())
        return created


@dataclass
class FakeReadReceiptWriter:
    _reader: FakeMessageReader
    fail: bool = False

    async def bulk_insert(
        self,
        receipts: Sequence[ReadReceipt],
        *,
        skip_duplicates: bool = True,
    ) -> list[int]:
        if self.fail:
            raise RuntimeError("receipt store unavailable")
        inserted: list[int] = []
        for receipt in receipts:
            key = (receipt.message_id, receipt.user_id)
            if key not in self._reader._receipts:
                self._reader._receipts[key] = receipt.read_at
                inserted.append(receipt.message_id)
        return inserted


@dataclass
class FakeWebhookReader:
    _hooks: list[WebhookSubscription] = field(default_factory=list)

    def add(self, channel_id: int, secret: str, url: str = "internal") -> WebhookSubscription:
        hook = WebhookSubscription(
            id=len(self._hooks) + 1,
            channel_id=channel_id,
            url=url,
            secret_token=secret,
            created_at=T0,
        )
        self._hooks.append(hook)
        return hook

    async def list_for_channel(self, channel_id: int) -> list[WebhookSubscription]:
        return [h for h in self._hooks if h.channel_id == channel_id]

    async def find_by_secret(self, channel_id: int, secret: str) -> WebhookSubscription | None:
        return next(
            (h for h in self._hooks if h.channel_id == channel_id and h.secret_token == secret),
            None,
        )


@dataclass
class FakeWebhookWriter:
    _reader: FakeWebhookReader

    async def create(self, data: CreateWebhookDTO) -> WebhookSubscription:
        return self._reader.add(data.channel_id, data.secret_token, data.url)


@dataclass
class FakeRefreshTokenStore:
    _tokens: dict[str, RefreshToken] = field(default_factory=dict)

    async def add(
        self,
        user_id: str,
        token: str,
        expires_at: datetime,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        self._tokens[token] = RefreshToken(
            id=len(self._tokens) + 1,
            user_id=user_id,
            token=token,
            expires_at=expires_at,
            is_revoked=False,
        )

    async def find_active(self, token: str) -> RefreshToken | None:
        stored = self._tokens.get(token)
        return stored if stored and not stored.is_revoked else None

    async def revoke(self, token: str) -> None:
        stored = self._tokens.get(token)
        if stored is not None:
            self._tokens[token] = RefreshToken(
                id=stored.id,
                user_id=stored.user_id,
                token=stored.token,
                expires_at=stored.expires_at,
                is_revoked=True,
            )


class FakeUoW:
    def __init__(self, clock: FakeClock | None = None) -> None:
        self.clock = clock or FakeClock()
        self.channels = FakeChannelReader()
        self.channels_w = FakeChannelWriter(self.channels)
        self.roles = FakeRoleReader()
        self.roles_w = FakeRoleWriter(self.roles)
        self.users = FakeUserReader()
        self.users_w = FakeUserWriter(self.users)
        self.messages = FakeMessageReader(self.users)
        self.messages_w = FakeMessageWriter(self.messages, self.clock)
        self.read_receipts_w = FakeReadReceiptWriter(self.messages)
        self.webhooks = FakeWebhookReader()
        self.webhooks_w = FakeWebhookWriter(self.webhooks)
        self.refresh_tokens = FakeRefreshTokenStore()
        self._committed = False
        self._rolled_back = False

    async def commit(self) -> None:
        self._committed = True

    async def rollback(self) -> None:
        self._rolled_back = True

    async def flush(self) -> None:
        pass


@dataclass
class RecordingPublisher:
    events: list[tuple[int, RealtimeEvent, dict[str, Any]]] = field(default_factory=list)

    async def publish(self, channel_id: int, event: RealtimeEvent, data: dict[str, Any]) -> None:
        self.events.append((channel_id, event, data))

    def of(self, event: RealtimeEvent) -> list[dict[str, Any]]:
        return [data for _, e, data in self.events if e == event]


@dataclass
class RecordingDispatcher:
    calls: list[tuple[list[WebhookSubscription], dict[str, Any]]] = field(default_factory=list)

    def dispatch(self, hooks: Sequence[WebhookSubscription], payload: dict[str, Any]) -> None:
        self.calls.append((list(hooks), payload))


@dataclass(eq=False)
class FakeSocket:
    sent: list[str] = field(default_factory=list)
    closed_with: int | None = None
    fail_sends: bool = False
    accepted: bool = False

    async def accept(self) -> None:
        self.accepted = True

    async def send_text(self, data: str) -> None:
        if self.fail_sends:
            raise ConnectionResetError("peer went away")
        self.sent.append(data)

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        self.closed_with = code


def make_message(
    message_id: int,
    *,
    channel_id: int = 7,
    sender_id: str | None = OWNER_ID,
    content: str = "hello",
    created_at: datetime = T0,
) -> Message:
    return Message(
        id=message_id,
        channel_id=channel_id,
        type=MessageType.TEXT.value,
        content=content,
        sender_id=sender_id,
        image_url=None,
        created_at=created_at,
    )
