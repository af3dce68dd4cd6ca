"""
Role Schemas
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import Field, field_validator

from kanbancord.core.rbac import DiscordPermission, parse_discord_permission
from kanbancord.schemas.base import BaseSchema


def _parse_discord_permissions(values: Any) -> list[DiscordPermission]:
    if values is None:
        return values
    if not isinstance(values, (list, tuple, set)):
        raise ValueError("permissions must be a list")
    return [parse_discord_permission(value) for value in values]


class RoleCreate(BaseSchema):
    role_id: str = Field(..., min_length=1)
    role_name: str = Field(..., min_length=1, max_length=100)
    permissions: list[DiscordPermission] = Field(default_factory=list)
    guild_id: str = Field(..., min_length=1)

    @field_validator("permissions", mode="before")
    @classmethod
    def parse_permissions(cls, values: Any):
        return _parse_discord_permissions(values)


class RoleUpdate(BaseSchema):
    role_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    permissions: Optional[list[DiscordPermission]] = None

    @field_validator("permissions", mode="before")
    @classmethod
    def parse_permissions(cls, values: Any):
        return _parse_discord_permissions(values)


class RoleResponse(BaseSchema):
    role_id: str
    role_name: str
    permissions: list[DiscordPermission]
    guild_id: str
