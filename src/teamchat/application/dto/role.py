from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from teamchat.application.dto._parse import clean_str
from teamchat.application.exceptions import ValidationError


@dataclass(frozen=True, slots=True)
class CreateRoleDTO:
    name: str

    @classmethod
    def from_raw(cls, name: Any) -> CreateRoleDTO:
        clean_name = clean_str(name)
        if not clean_name:
            raise ValidationError("Role name is required")
        return cls(name=clean_name)
