"""Guild endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from kanbancord.core.database import get_db
from kanbancord.core.deps import get_current_identity, require_guild_permission
from kanbancord.core.rbac import KanbanPermission
from kanbancord.core.security import SessionClaims
from kanbancord.schemas.guild import GuildCreate, GuildResponse, GuildUpdate, MemberSchema
from kanbancord.schemas.permission import TaggedPermissionEntry
from kanbancord.schemas.role import RoleResponse
from kanbancord.services.guild import guild_service

router = APIRouter()


@router.get("/", response_model=list[GuildResponse])
async def list_guilds(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return await guild_service.list_guilds(db, skip=skip, limit=limit)


@router.get("/{guild_id}", response_model=GuildResponse)
async def get_guild(guild_id: str, db: AsyncSession = Depends(get_db)) -> Any:
    return await guild_service.get_guild(db, guild_id)


@router.post("/", response_model=GuildResponse, status_code=status.HTTP_201_CREATED)
async def create_guild(guild_data: GuildCreate, db: AsyncSession = Depends(get_db)) -> Any:
    """Register a guild; an ADMINISTRATOR settings entry is added when missing."""
    return await guild_service.add_guild(db, guild_data)


@router.put("/{guild_id}", response_model=GuildResponse)
async def update_guild(
    guild_id: str,
    guild_data: GuildUpdate,
    identity: SessionClaims = Depends(require_guild_permission(KanbanPermission.MANAGE_GUILD_SETTINGS)),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return await guild_service.update_guild(db, guild_id, guild_data)


@router.get("/{guild_id}/permissions", response_model=list[TaggedPermissionEntry])
async def get_guild_permissions(
    guild_id: str,
    identity: SessionClaims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return await guild_service.get_guild_permissions(db, guild_id)


@router.get("/{guild_id}/members", response_model=list[MemberSchema])
async def get_guild_members(
    guild_id: str,
    identity: SessionClaims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return await guild_service.get_guild_members(db, guild_id)


@router.get("/{guild_id}/roles", response_model=list[RoleResponse])
async def get_guild_roles(
    guild_id: str,
    identity: SessionClaims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return await guild_service.get_guild_roles(db, guild_id)
