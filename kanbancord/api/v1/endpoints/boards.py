"""Board endpoints, each guarded by the kanban permission it needs."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from kanbancord.core.database import get_db
from kanbancord.core.deps import (
    authorize_guild,
    get_current_identity,
    get_permission_resolver,
    require_board_permission,
    require_guild_permission,
)
from kanbancord.core.permission_resolver import PermissionResolver
from kanbancord.core.rbac import KanbanPermission
from kanbancord.core.security import SessionClaims
from kanbancord.schemas.base import ErrorResponse, SuccessResponse
from kanbancord.schemas.board import BoardCreate, BoardResponse, BoardUpdate
from kanbancord.schemas.permission import PermissionEntrySchema
from kanbancord.services.board import board_service

logger = structlog.get_logger()
router = APIRouter(
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    }
)


@router.post("/", response_model=BoardResponse, status_code=status.HTTP_201_CREATED)
async def create_board(
    board_data: BoardCreate,
    identity: SessionClaims = Depends(get_current_identity),
    resolver: PermissionResolver = Depends(get_permission_resolver),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Create a board; the caller needs CREATE_BOARD in the target guild and becomes its creator."""
    await authorize_guild(resolver, identity, board_data.guild_id, KanbanPermission.CREATE_BOARD)
    return await board_service.create_board(db, board_data, created_by_user_id=identity.user_id)


@router.get("/guild/{guild_id}", response_model=list[BoardResponse])
async def list_guild_boards(
    guild_id: str,
    identity: SessionClaims = Depends(require_guild_permission(KanbanPermission.VIEW_BOARD)),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return await board_service.list_guild_boards(db, guild_id)


@router.get("/{board_id}", response_model=BoardResponse)
async def get_board(
    board_id: str,
    identity: SessionClaims = Depends(require_board_permission(KanbanPermission.VIEW_BOARD)),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return await board_service.get_board(db, board_id)


@router.put("/{board_id}", response_model=BoardResponse)
async def update_board(
    board_id: str,
    board_data: BoardUpdate,
    identity: SessionClaims = Depends(require_board_permission(KanbanPermission.EDIT_BOARD)),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return await board_service.update_board(db, board_id, board_data)


@router.put("/{board_id}/permissions", response_model=BoardResponse)
async def set_board_permissions(
    board_id: str,
    permissions: list[PermissionEntrySchema],
    identity: SessionClaims = Depends(require_board_permission(KanbanPermission.MANAGE_BOARD_PERMISSIONS)),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return await board_service.set_board_permissions(db, board_id, permissions)


@router.delete("/{board_id}", response_model=SuccessResponse)
async def delete_board(
    board_id: str,
    identity: SessionClaims = Depends(require_board_permission(KanbanPermission.DELETE_BOARD)),
    db: AsyncSession = Depends(get_db),
) -> Any:
    await board_service.delete_board(db, board_id)
    logger.info("Board deleted", board_id=board_id, deleted_by=identity.user_id)
    return SuccessResponse(message="Board deleted successfully", data={"boardId": board_id})
