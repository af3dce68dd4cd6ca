"""
Authentication Schemas
"""

from typing import Optional
from pydantic import Field

from kanbancord.schemas.base import BaseSchema


class LoginRequest(BaseSchema):
    """Login request schema; the Discord OAuth exchange happens upstream"""
    user_id: str = Field(..., min_length=1, description="Discord user ID")


class SessionUser(BaseSchema):
    user_id: str
    username: str
    global_name: Optional[str] = None


class LoginResponse(BaseSchema):
    token: str = Field(..., description="Bearer session token")
    user: SessionUser
