"""
Guild Schemas
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator

from kanbancord.schemas.base import BaseSchema
from kanbancord.schemas.permission import PermissionEntrySchema


class MemberSchema(BaseSchema):
    user_id: str = Field(..., min_length=1)
    role_ids: list[str] = Field(default_factory=list)


def _unique_members(members: Optional[list[MemberSchema]]) -> Optional[list[MemberSchema]]:
    """A guild holds at most one member record per user."""
    seen = set()
    for member in members or []:
        if member.user_id in seen:
            raise ValueError(f"Duplicate member user ID: {member.user_id}")
        seen.add(member.user_id)
    return members


class GuildCreate(BaseSchema):
    guild_id: str = Field(..., min_length=1)
    guild_name: str = Field(..., min_length=1, max_length=100)
    guild_owner_id: str = Field(..., min_length=1)
    settings: list[PermissionEntrySchema] = Field(default_factory=list)
    role_ids: list[str] = Field(default_factory=list)
    members: list[MemberSchema] = Field(default_factory=list)
    board_ids: list[str] = Field(default_factory=list)

    @field_validator("members")
    @classmethod
    def unique_members(cls, members):
        return _unique_members(members)


class GuildUpdate(BaseSchema):
    # guild_owner_id is immutable and deliberately absent
    guild_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    settings: Optional[list[PermissionEntrySchema]] = None
    role_ids: Optional[list[str]] = None
    members: Optional[list[MemberSchema]] = None
    board_ids: Optional[list[str]] = None

    @field_validator("members")
    @classmethod
    def unique_members(cls, members):
        return _unique_members(members)


class GuildResponse(BaseSchema):
    guild_id: str
    guild_name: str
    guild_owner_id: str
    settings: list[PermissionEntrySchema]
    role_ids: list[str]
    members: list[MemberSchema]
    board_ids: list[str]
