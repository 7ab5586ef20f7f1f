from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from teamchat.application.dto._parse import clean_str, parse_id_list
from teamchat.application.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass(frozen=True, slots=True)
class RegisterUserDTO:
    email: str
    password: str
    display_name: str

    @classmethod
    def from_raw(cls, email: Any, password: Any, display_name: Any) -> RegisterUserDTO:
        address = clean_str(email).lower()
        secret = password if isinstance(password, str) else ""
        name = clean_str(display_name)
        if not address or not secret or not name:
            raise ValidationError("email, password and display_name are required")
        if not _EMAIL_RE.match(address):
            raise ValidationError("email is invalid")
        return cls(email=address, password=secret, display_name=name)


@dataclass(frozen=True, slots=True)
class UpdateUserRolesDTO:
    user_id: str
    role_ids: tuple[str, ...]

    @classmethod
    def from_raw(cls, user_id: Any, role_ids: Any) -> UpdateUserRolesDTO:
        uid = clean_str(user_id)
        if not uid:
            raise ValidationError("user id is required")
        return cls(user_id=uid, role_ids=parse_id_list(role_ids, "role_ids"))
