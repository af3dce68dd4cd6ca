"""User endpoints, including resolved kanban permissions."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from kanbancord.core.database import get_db
from kanbancord.core.deps import get_current_identity, get_permission_resolver
from kanbancord.core.permission_resolver import PermissionResolver
from kanbancord.core.rbac import KanbanPermission
from kanbancord.core.security import SessionClaims
from kanbancord.schemas.guild import GuildResponse
from kanbancord.schemas.user import UserCreate, UserResponse, UserUpdate
from kanbancord.services.user import user_service

logger = structlog.get_logger()
router = APIRouter()


def _ordered(capabilities: frozenset[KanbanPermission]) -> list[KanbanPermission]:
    return [permission for permission in KanbanPermission if permission in capabilities]


@router.get("/", response_model=list[UserResponse])
async def list_users(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return await user_service.list_users(db, skip=skip, limit=limit)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, db: AsyncSession = Depends(get_db)) -> Any:
    return await user_service.get_user(db, user_id)


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(user_data: UserCreate, db: AsyncSession = Depends(get_db)) -> Any:
    return await user_service.add_user(db, user_data)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(user_id: str, user_data: UserUpdate, db: AsyncSession = Depends(get_db)) -> Any:
    return await user_service.update_user(db, user_id, user_data)


@router.get("/{user_id}/guilds", response_model=list[GuildResponse])
async def get_user_guilds(
    user_id: str,
    identity: SessionClaims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return await user_service.get_user_guilds(db, user_id)


@router.get("/{user_id}/guilds/{guild_id}/kanban-permissions", response_model=list[KanbanPermission])
async def get_guild_kanban_permissions(
    user_id: str,
    guild_id: str,
    identity: SessionClaims = Depends(get_current_identity),
    resolver: PermissionResolver = Depends(get_permission_resolver),
) -> Any:
    """Kanban capabilities the user holds in a guild."""
    return _ordered(await resolver.resolve_guild_capabilities(user_id, guild_id))


@router.get("/{user_id}/boards/{board_id}/kanban-permissions", response_model=list[KanbanPermission])
async def get_board_kanban_permissions(
    user_id: str,
    board_id: str,
    identity: SessionClaims = Depends(get_current_identity),
    resolver: PermissionResolver = Depends(get_permission_resolver),
) -> Any:
    """Kanban capabilities the user holds on a board."""
    return _ordered(await resolver.resolve_board_capabilities(user_id, board_id))
