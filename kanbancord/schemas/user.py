"""
User Schemas
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from kanbancord.schemas.base import BaseSchema


class UserCreate(BaseSchema):
    user_id: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1, max_length=100)
    global_name: Optional[str] = Field(default=None, max_length=100)
    user_avatar: Optional[str] = Field(default=None, max_length=500)
    guild_ids: list[str] = Field(default_factory=list)


class UserUpdate(BaseSchema):
    username: Optional[str] = Field(default=None, min_length=1, max_length=100)
    global_name: Optional[str] = Field(default=None, max_length=100)
    user_avatar: Optional[str] = Field(default=None, max_length=500)
    guild_ids: Optional[list[str]] = None


class UserResponse(BaseSchema):
    user_id: str
    username: str
    global_name: Optional[str] = None
    user_avatar: Optional[str] = None
    guild_ids: list[str]
