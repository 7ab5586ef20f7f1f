from __future__ import annotations

from enum import StrEnum


class Role(StrEnum):
    ADMIN = "admin"
    EMPLOYEE = "employee"

    @classmethod
    def from_claim(cls, raw: object) -> Role:
        """Case-insensitive match; unknown or missing roles are employees."""
        if isinstance(raw, str):
            try:
                return cls(raw.strip().lower())
            except ValueError:
                pass
        return cls.EMPLOYEE


class MessageType(StrEnum):
    TEXT = "text"
    IMAGE = "image"
    WEBHOOK = "webhook"
    NOTIFICATION = "notification"


class RealtimeEvent(StrEnum):
    MESSAGE_NEW = "message:new"
    MESSAGE_READ = "message:read"
    CONNECTED = "connected"
    ERROR = "error"
