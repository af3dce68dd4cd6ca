"""
Guild Repository
Database operations for guilds and their members.
"""

from __future__ import annotations

from typing import Any, Iterable

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from kanbancord.models.guild import Guild, GuildMember
from kanbancord.repositories.base import CRUDBase

logger = structlog.get_logger()


class GuildRepository(CRUDBase[Guild]):
    async def list_members(self, db: AsyncSession, guild_id: str) -> list[GuildMember]:
        result = await db.execute(
            select(GuildMember)
            .where(GuildMember.guild_id == guild_id)
            .order_by(GuildMember.id)
        )
        return list(result.scalars().all())

    async def replace_members(
        self,
        db: AsyncSession,
        guild_id: str,
        members: Iterable[dict[str, Any]],
        commit: bool = True,
    ) -> list[GuildMember]:
        """Replace the member list of a guild with the given {user_id, role_ids} records."""
        await db.execute(delete(GuildMember).where(GuildMember.guild_id == guild_id))

        new_members = [
            GuildMember(guild_id=guild_id, user_id=member["user_id"], role_ids=list(member.get("role_ids") or []))
            for member in members
        ]
        db.add_all(new_members)

        if commit:
            await db.commit()
        else:
            await db.flush()

        logger.info("Guild members replaced", guild_id=guild_id, count=len(new_members))
        return new_members


guild_repository = GuildRepository(Guild, "guild_id")
