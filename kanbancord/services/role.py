"""
Role Service
"""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from kanbancord.core.exceptions import ConflictError, NotFoundError
from kanbancord.models.role import Role
from kanbancord.repositories.guild import guild_repository
from kanbancord.repositories.role import role_repository
from kanbancord.schemas.role import RoleCreate, RoleResponse, RoleUpdate

logger = structlog.get_logger()


class RoleService:
    def _to_role_response(self, role: Role) -> RoleResponse:
        return RoleResponse(
            role_id=role.role_id,
            role_name=role.role_name,
            permissions=role.discord_permissions,
            guild_id=role.guild_id,
        )

    async def _get_role_or_404(self, db: AsyncSession, role_id: str) -> Role:
        role = await role_repository.get(db, id=role_id)
        if not role:
            raise NotFoundError("Role", role_id)
        return role

    async def list_roles(self, db: AsyncSession, skip: int = 0, limit: int = 100) -> list[RoleResponse]:
        roles = await role_repository.get_multi(db, skip=skip, limit=limit)
        return [self._to_role_response(role) for role in roles]

    async def get_role(self, db: AsyncSession, role_id: str) -> RoleResponse:
        return self._to_role_response(await self._get_role_or_404(db, role_id))

    async def create_role(self, db: AsyncSession, data: RoleCreate) -> RoleResponse:
        guild = await guild_repository.get(db, id=data.guild_id)
        if not guild:
            raise NotFoundError("Guild", data.guild_id)
        if await role_repository.get(db, id=data.role_id):
            raise ConflictError("Role already exists")

        role = await role_repository.create(
            db,
            obj_in={
                "role_id": data.role_id,
                "role_name": data.role_name,
                "permissions": [permission.value for permission in data.permissions],
                "guild_id": data.guild_id,
            },
            commit=False,
        )
        if role.role_id not in (guild.role_ids or []):
            guild.role_ids = [*(guild.role_ids or []), role.role_id]
        await db.commit()

        logger.info("Role created", role_id=role.role_id, guild_id=role.guild_id)
        return self._to_role_response(role)

    async def update_role(self, db: AsyncSession, role_id: str, data: RoleUpdate) -> RoleResponse:
        role = await self._get_role_or_404(db, role_id)

        updates = {}
        if data.role_name is not None:
            updates["role_name"] = data.role_name
        if data.permissions is not None:
            updates["permissions"] = [permission.value for permission in data.permissions]

        role = await role_repository.update(db, db_obj=role, obj_in=updates)
        return self._to_role_response(role)

    async def delete_role(self, db: AsyncSession, role_id: str) -> None:
        """
        Delete a role.

        Member records keep referencing the role ID; resolution treats the
        dangling reference as contributing nothing.
        """
        role = await self._get_role_or_404(db, role_id)

        guild = await guild_repository.get(db, id=role.guild_id)
        if guild:
            guild.role_ids = [existing for existing in guild.role_ids or [] if existing != role_id]

        await role_repository.delete(db, id=role_id)


role_service = RoleService()
