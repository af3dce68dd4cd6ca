"""Role endpoints. Mutations need MANAGE_GUILD_SETTINGS in the role's guild."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from kanbancord.core.database import get_db
from kanbancord.core.deps import authorize_guild, get_current_identity, get_permission_resolver
from kanbancord.core.permission_resolver import PermissionResolver
from kanbancord.core.rbac import KanbanPermission
from kanbancord.core.security import SessionClaims
from kanbancord.schemas.base import ErrorResponse, SuccessResponse
from kanbancord.schemas.role import RoleCreate, RoleResponse, RoleUpdate
from kanbancord.services.role import role_service

router = APIRouter(
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    }
)


@router.get("/", response_model=list[RoleResponse])
async def list_roles(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return await role_service.list_roles(db, skip=skip, limit=limit)


@router.get("/{role_id}", response_model=RoleResponse)
async def get_role(role_id: str, db: AsyncSession = Depends(get_db)) -> Any:
    return await role_service.get_role(db, role_id)


@router.post("/", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
    role_data: RoleCreate,
    identity: SessionClaims = Depends(get_current_identity),
    resolver: PermissionResolver = Depends(get_permission_resolver),
    db: AsyncSession = Depends(get_db),
) -> Any:
    await authorize_guild(resolver, identity, role_data.guild_id, KanbanPermission.MANAGE_GUILD_SETTINGS)
    return await role_service.create_role(db, role_data)


@router.put("/{role_id}", response_model=RoleResponse)
async def update_role(
    role_id: str,
    role_data: RoleUpdate,
    identity: SessionClaims = Depends(get_current_identity),
    resolver: PermissionResolver = Depends(get_permission_resolver),
    db: AsyncSession = Depends(get_db),
) -> Any:
    role = await role_service.get_role(db, role_id)
    await authorize_guild(resolver, identity, role.guild_id, KanbanPermission.MANAGE_GUILD_SETTINGS)
    return await role_service.update_role(db, role_id, role_data)


@router.delete("/{role_id}", response_model=SuccessResponse)
async def delete_role(
    role_id: str,
    identity: SessionClaims = Depends(get_current_identity),
    resolver: PermissionResolver = Depends(get_permission_resolver),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Delete a role; members referencing it are left untouched."""
    role = await role_service.get_role(db, role_id)
    await authorize_guild(resolver, identity, role.guild_id, KanbanPermission.MANAGE_GUILD_SETTINGS)
    await role_service.delete_role(db, role_id)
    return SuccessResponse(message="Role deleted successfully", data={"roleId": role_id})
