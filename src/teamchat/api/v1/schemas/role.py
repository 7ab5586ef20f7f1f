from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class CreateRoleRequest(BaseModel):
    name: Any = None


class RoleResponse(BaseModel):
    id: str
    name: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
