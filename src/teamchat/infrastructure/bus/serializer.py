from __future__ import annotations

import json

from teamchat.infrastructure.ws.protocol import Envelope


def serialize_frame(key: str, envelope: Envelope) -> str:
    return json.dumps({"key": key, "frame": envelope.model_dump_json()})


def deserialize_frame(raw: str | bytes) -> tuple[str, str]:
    data = json.loads(raw)
    return data["key"], data["frame"]
