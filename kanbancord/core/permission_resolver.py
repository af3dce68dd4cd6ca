"""
Kanban capability resolution for guilds and boards.

A user's capabilities come from three layers: ownership (guild owner or board
creator short-circuits to ADMINISTRATOR), the Discord permissions conferred
by the user's roles, and the permission entries stored on the guild or board.
"""

from __future__ import annotations

import asyncio
from typing import Iterable

import structlog

from kanbancord.core.exceptions import NotFoundError
from kanbancord.core.permission_store import PermissionStore
from kanbancord.core.rbac import DiscordPermission, KanbanPermission, PermissionEntry
from kanbancord.models.guild import Guild

logger = structlog.get_logger()

ADMINISTRATOR_ONLY = frozenset({KanbanPermission.ADMINISTRATOR})


def collect_capabilities(entries: Iterable[PermissionEntry], keys: set[str]) -> frozenset[KanbanPermission]:
    """Union of the capabilities of every entry whose identifier is one of ``keys``."""
    granted: set[KanbanPermission] = set()
    for entry in entries:
        if entry.identifier in keys:
            granted |= entry.kanban_permissions
    return frozenset(granted)


class PermissionResolver:
    def __init__(self, store: PermissionStore) -> None:
        self._store = store

    async def _get_guild(self, guild_id: str) -> Guild:
        guild = await self._store.get_guild(guild_id)
        if guild is None:
            logger.warning("Guild not found during permission resolution", guild_id=guild_id)
            raise NotFoundError("Guild", guild_id)
        return guild

    async def _member_role_ids(self, guild_id: str, user_id: str) -> list[str]:
        for member in await self._store.list_members(guild_id):
            if member.user_id == user_id:
                return list(member.role_ids or [])
        return []

    async def _role_permissions(self, role_ids: list[str]) -> list[DiscordPermission]:
        """Fetch all roles concurrently and merge the Discord permissions they confer."""
        unique_role_ids = list(dict.fromkeys(role_ids))
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(self._store.get_role(role_id)) for role_id in unique_role_ids]
        except ExceptionGroup as errors:
            raise errors.exceptions[0]

        permissions: list[DiscordPermission] = []
        for role_id, task in zip(unique_role_ids, tasks):
            role = task.result()
            if role is None:
                # Deleted roles may still be referenced by members
                logger.debug("Skipping dangling role reference", role_id=role_id)
                continue
            permissions.extend(role.discord_permissions)
        return permissions

    async def _guild_identity(self, guild: Guild, user_id: str) -> tuple[list[str], list[DiscordPermission]]:
        role_ids = await self._member_role_ids(guild.guild_id, user_id)
        return role_ids, await self._role_permissions(role_ids)

    async def resolve_discord_permissions(self, user_id: str, guild_id: str) -> list[DiscordPermission]:
        """
        Discord permissions a user holds in a guild through its roles.

        The guild owner holds ADMINISTRATOR regardless of roles. Duplicates are
        kept; callers only test membership.
        """
        guild = await self._get_guild(guild_id)
        if guild.guild_owner_id == user_id:
            return [DiscordPermission.ADMINISTRATOR]

        _, permissions = await self._guild_identity(guild, user_id)
        return permissions

    async def resolve_guild_capabilities(self, user_id: str, guild_id: str) -> frozenset[KanbanPermission]:
        guild = await self._get_guild(guild_id)
        if guild.guild_owner_id == user_id:
            logger.debug("Guild owner resolved as administrator", user_id=user_id, guild_id=guild_id)
            return ADMINISTRATOR_ONLY

        role_ids, discord_permissions = await self._guild_identity(guild, user_id)
        keys = {user_id, *role_ids, *(permission.value for permission in discord_permissions)}
        capabilities = collect_capabilities(guild.permission_entries, keys)

        logger.debug(
            "Guild capabilities resolved",
            user_id=user_id,
            guild_id=guild_id,
            role_count=len(role_ids),
            capabilities=sorted(c.value for c in capabilities),
        )
        return capabilities

    async def resolve_board_capabilities(self, user_id: str, board_id: str) -> frozenset[KanbanPermission]:
        board = await self._store.get_board(board_id)
        if board is None:
            logger.warning("Board not found during permission resolution", board_id=board_id)
            raise NotFoundError("Board", board_id)

        if board.created_by_user_id == user_id:
            logger.debug("Board creator resolved as administrator", user_id=user_id, board_id=board_id)
            return ADMINISTRATOR_ONLY

        # Board entries are keyed by user ID or Discord permission, never by role ID
        discord_permissions = await self.resolve_discord_permissions(user_id, board.guild_id)
        keys = {user_id, *(permission.value for permission in discord_permissions)}
        capabilities = collect_capabilities(board.permission_entries, keys)

        logger.debug(
            "Board capabilities resolved",
            user_id=user_id,
            board_id=board_id,
            guild_id=board.guild_id,
            capabilities=sorted(c.value for c in capabilities),
        )
        return capabilities
