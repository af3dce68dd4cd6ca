"""
Role Repository
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kanbancord.models.role import Role
from kanbancord.repositories.base import CRUDBase


class RoleRepository(CRUDBase[Role]):
    async def get_by_guild(self, db: AsyncSession, guild_id: str) -> list[Role]:
        result = await db.execute(select(Role).where(Role.guild_id == guild_id).order_by(Role.role_id))
        return list(result.scalars().all())


role_repository = RoleRepository(Role, "role_id")
