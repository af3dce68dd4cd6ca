"""
Authentication Endpoints
Session token issuance and introspection
"""

from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from kanbancord.core.database import get_db
from kanbancord.core.deps import get_current_identity
from kanbancord.core.security import SessionClaims
from kanbancord.schemas.auth import LoginRequest, LoginResponse, SessionUser
from kanbancord.services.user import user_service

logger = structlog.get_logger()
router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Issue a session token for a known Discord user

    The Discord OAuth exchange happens in the front-end; this endpoint only
    binds the resulting user ID to a signed session token.
    """
    return await user_service.login(db, login_data.user_id)


@router.get("/me", response_model=SessionUser)
async def read_current_session(
    identity: SessionClaims = Depends(get_current_identity),
) -> Any:
    """Identity carried by the caller's session token."""
    return SessionUser(
        user_id=identity.user_id,
        username=identity.username or "",
        global_name=identity.global_name,
    )
