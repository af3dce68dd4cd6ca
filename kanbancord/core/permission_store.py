"""
Read-only storage seam used by the permission resolver.

The resolver only needs four lookups. Keeping them behind a small interface
lets resolution run against the database in the service and against plain
objects in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kanbancord.models.board import Board
from kanbancord.models.guild import Guild, GuildMember
from kanbancord.models.role import Role
from kanbancord.repositories.board import board_repository
from kanbancord.repositories.guild import guild_repository
from kanbancord.repositories.role import role_repository


class PermissionStore(ABC):
    @abstractmethod
    async def get_guild(self, guild_id: str) -> Optional[Guild]:
        raise NotImplementedError

    @abstractmethod
    async def get_board(self, board_id: str) -> Optional[Board]:
        raise NotImplementedError

    @abstractmethod
    async def get_role(self, role_id: str) -> Optional[Role]:
        raise NotImplementedError

    @abstractmethod
    async def list_members(self, guild_id: str) -> list[GuildMember]:
        raise NotImplementedError


class DatabasePermissionStore(PermissionStore):
    """
    Every lookup runs in its own short-lived session.

    An AsyncSession cannot be shared between concurrent tasks, and role
    lookups are fanned out concurrently by the resolver.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_guild(self, guild_id: str) -> Optional[Guild]:
        async with self._session_factory() as session:
            return await guild_repository.get(session, id=guild_id)

    async def get_board(self, board_id: str) -> Optional[Board]:
        async with self._session_factory() as session:
            return await board_repository.get(session, id=board_id)

    async def get_role(self, role_id: str) -> Optional[Role]:
        async with self._session_factory() as session:
            return await role_repository.get(session, id=role_id)

    async def list_members(self, guild_id: str) -> list[GuildMember]:
        async with self._session_factory() as session:
            return await guild_repository.list_members(session, guild_id)
