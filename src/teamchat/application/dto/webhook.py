from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from teamchat.application.dto._parse import clean_str, parse_int
from teamchat.application.exceptions import ValidationError
from teamchat.domain.entities.webhook import INTERNAL_URL


@dataclass(frozen=True, slots=True)
class CreateWebhookDTO:
    channel_id: int
    url: str
    secret_token: str

    @classmethod
    def from_raw(cls, channel_id: Any, url: Any, secret_token: Any) -> CreateWebhookDTO:
        cid = parse_int(channel_id, "channel_id")
        secret = clean_str(secret_token)
        if not secret:
            raise ValidationError("secret_token is required")
        return cls(
            channel_id=cid,
            url=clean_str(url) or INTERNAL_URL,
            secret_token=secret,
        )
