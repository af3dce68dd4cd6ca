"""
Board Service
Business logic for boards and their permission entries.
"""

from __future__ import annotations

import copy
import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from kanbancord.core.exceptions import NotFoundError
from kanbancord.models.board import Board
from kanbancord.repositories.board import board_repository
from kanbancord.repositories.guild import guild_repository
from kanbancord.schemas.board import BoardCreate, BoardResponse, BoardUpdate
from kanbancord.schemas.permission import PermissionEntrySchema, entries_to_storage

logger = structlog.get_logger()


class BoardService:
    def _to_board_response(self, board: Board) -> BoardResponse:
        return BoardResponse(
            board_id=board.board_id,
            board_name=board.board_name,
            created_by_user_id=board.created_by_user_id,
            guild_id=board.guild_id,
            column_ids=list(board.column_ids or []),
            permissions=[PermissionEntrySchema.from_entry(entry) for entry in board.permission_entries],
        )

    async def _get_board_or_404(self, db: AsyncSession, board_id: str) -> Board:
        board = await board_repository.get(db, id=board_id)
        if not board:
            raise NotFoundError("Board", board_id)
        return board

    async def get_board(self, db: AsyncSession, board_id: str) -> BoardResponse:
        return self._to_board_response(await self._get_board_or_404(db, board_id))

    async def list_guild_boards(self, db: AsyncSession, guild_id: str) -> list[BoardResponse]:
        return [self._to_board_response(board) for board in await board_repository.get_by_guild(db, guild_id)]

    async def create_board(self, db: AsyncSession, data: BoardCreate, created_by_user_id: str) -> BoardResponse:
        """
        Create a board in a guild

        When no permissions are supplied the board starts from a copy of the
        guild settings as they are now; later guild changes do not touch it.
        """
        guild = await guild_repository.get(db, id=data.guild_id)
        if not guild:
            raise NotFoundError("Guild", data.guild_id)

        if data.permissions:
            permissions = entries_to_storage(data.permissions)
        else:
            permissions = copy.deepcopy(guild.settings)

        # Model validators reject empty names, creators, guilds and permissions
        board = Board(
            board_id=str(uuid.uuid4()),
            board_name=data.board_name,
            created_by_user_id=created_by_user_id,
            guild_id=guild.guild_id,
            column_ids=list(data.column_ids),
            permissions=permissions,
        )
        db.add(board)
        guild.board_ids = [*(guild.board_ids or []), board.board_id]
        await db.commit()

        logger.info(
            "Board created",
            board_id=board.board_id,
            guild_id=board.guild_id,
            created_by=created_by_user_id,
            inherited_permissions=not data.permissions,
        )
        return self._to_board_response(board)

    async def update_board(self, db: AsyncSession, board_id: str, data: BoardUpdate) -> BoardResponse:
        board = await self._get_board_or_404(db, board_id)
        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        board = await board_repository.update(db, db_obj=board, obj_in=updates)
        return self._to_board_response(board)

    async def set_board_permissions(
        self,
        db: AsyncSession,
        board_id: str,
        permissions: list[PermissionEntrySchema],
    ) -> BoardResponse:
        board = await self._get_board_or_404(db, board_id)
        board = await board_repository.update(
            db,
            db_obj=board,
            obj_in={"permissions": entries_to_storage(permissions)},
        )
        logger.info("Board permissions replaced", board_id=board_id, entries=len(permissions))
        return self._to_board_response(board)

    async def delete_board(self, db: AsyncSession, board_id: str) -> None:
        board = await self._get_board_or_404(db, board_id)

        guild = await guild_repository.get(db, id=board.guild_id)
        if guild:
            guild.board_ids = [existing for existing in guild.board_ids or [] if existing != board_id]

        await board_repository.delete(db, id=board_id)


board_service = BoardService()
