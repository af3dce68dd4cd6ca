"""
Board Repository
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kanbancord.models.board import Board
from kanbancord.repositories.base import CRUDBase


class BoardRepository(CRUDBase[Board]):
    async def get_by_guild(self, db: AsyncSession, guild_id: str) -> list[Board]:
        result = await db.execute(
            select(Board).where(Board.guild_id == guild_id).order_by(Board.created_at, Board.board_id)
        )
        return list(result.scalars().all())


board_repository = BoardRepository(Board, "board_id")
