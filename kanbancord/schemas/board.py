"""
Board Schemas
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from kanbancord.schemas.base import BaseSchema
from kanbancord.schemas.permission import PermissionEntrySchema


class BoardCreate(BaseSchema):
    board_name: str = Field(..., min_length=1, max_length=200)
    guild_id: str = Field(..., min_length=1)
    column_ids: list[str] = Field(default_factory=list)
    # Empty means "copy the guild settings"
    permissions: list[PermissionEntrySchema] = Field(default_factory=list)


class BoardUpdate(BaseSchema):
    board_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    column_ids: Optional[list[str]] = None


class BoardResponse(BaseSchema):
    board_id: str
    board_name: str
    created_by_user_id: str
    guild_id: str
    column_ids: list[str]
    permissions: list[PermissionEntrySchema]
