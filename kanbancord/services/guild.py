"""
Guild Service
Business logic for guilds, their permission settings and members.
"""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from kanbancord.core.exceptions import ConflictError, NotFoundError
from kanbancord.core.rbac import classify_identifier, ensure_admin_entry
from kanbancord.models.guild import Guild, GuildMember
from kanbancord.repositories.guild import guild_repository
from kanbancord.repositories.role import role_repository
from kanbancord.schemas.guild import GuildCreate, GuildResponse, GuildUpdate, MemberSchema
from kanbancord.schemas.permission import PermissionEntrySchema, TaggedPermissionEntry
from kanbancord.schemas.role import RoleResponse

logger = structlog.get_logger()


def normalize_settings(settings: list[PermissionEntrySchema]) -> list[dict]:
    """Storage form of guild settings, always including the ADMINISTRATOR entry."""
    entries = ensure_admin_entry([entry.to_entry() for entry in settings])
    return [entry.to_dict() for entry in entries]


class GuildService:
    def _to_member(self, member: GuildMember) -> MemberSchema:
        return MemberSchema(user_id=member.user_id, role_ids=list(member.role_ids or []))

    async def _to_guild_response(self, db: AsyncSession, guild: Guild) -> GuildResponse:
        members = await guild_repository.list_members(db, guild.guild_id)
        return GuildResponse(
            guild_id=guild.guild_id,
            guild_name=guild.guild_name,
            guild_owner_id=guild.guild_owner_id,
            settings=[PermissionEntrySchema.from_entry(entry) for entry in guild.permission_entries],
            role_ids=list(guild.role_ids or []),
            members=[self._to_member(member) for member in members],
            board_ids=list(guild.board_ids or []),
        )

    async def _get_guild_or_404(self, db: AsyncSession, guild_id: str) -> Guild:
        guild = await guild_repository.get(db, id=guild_id)
        if not guild:
            raise NotFoundError("Guild", guild_id)
        return guild

    async def list_guilds(self, db: AsyncSession, skip: int = 0, limit: int = 100) -> list[GuildResponse]:
        guilds = await guild_repository.get_multi(db, skip=skip, limit=limit)
        return [await self._to_guild_response(db, guild) for guild in guilds]

    async def get_guild(self, db: AsyncSession, guild_id: str) -> GuildResponse:
        guild = await self._get_guild_or_404(db, guild_id)
        return await self._to_guild_response(db, guild)

    async def add_guild(self, db: AsyncSession, data: GuildCreate) -> GuildResponse:
        if await guild_repository.get(db, id=data.guild_id):
            raise ConflictError("Guild already exists")

        guild = await guild_repository.create(
            db,
            obj_in={
                "guild_id": data.guild_id,
                "guild_name": data.guild_name,
                "guild_owner_id": data.guild_owner_id,
                "settings": normalize_settings(data.settings),
                "role_ids": list(data.role_ids),
                "board_ids": list(data.board_ids),
            },
            commit=False,
        )
        await guild_repository.replace_members(
            db,
            guild.guild_id,
            [member.model_dump() for member in data.members],
            commit=False,
        )
        await db.commit()

        logger.info("Guild created", guild_id=guild.guild_id, owner_id=guild.guild_owner_id)
        return await self._to_guild_response(db, guild)

    async def update_guild(self, db: AsyncSession, guild_id: str, data: GuildUpdate) -> GuildResponse:
        guild = await self._get_guild_or_404(db, guild_id)

        updates = {}
        if data.guild_name is not None:
            updates["guild_name"] = data.guild_name
        if data.settings is not None:
            updates["settings"] = normalize_settings(data.settings)
        if data.role_ids is not None:
            updates["role_ids"] = list(data.role_ids)
        if data.board_ids is not None:
            updates["board_ids"] = list(data.board_ids)

        guild = await guild_repository.update(db, db_obj=guild, obj_in=updates, commit=False)
        if data.members is not None:
            await guild_repository.replace_members(
                db,
                guild_id,
                [member.model_dump() for member in data.members],
                commit=False,
            )
        await db.commit()

        logger.info("Guild updated", guild_id=guild_id, fields=sorted(data.model_dump(exclude_unset=True)))
        return await self._to_guild_response(db, guild)

    async def get_guild_permissions(self, db: AsyncSession, guild_id: str) -> list[TaggedPermissionEntry]:
        """Guild settings with each identifier tagged as user, role or Discord permission."""
        guild = await self._get_guild_or_404(db, guild_id)
        role_ids = set(guild.role_ids or []) | {role.role_id for role in await role_repository.get_by_guild(db, guild_id)}
        return [
            TaggedPermissionEntry(
                **PermissionEntrySchema.from_entry(entry).model_dump(),
                kind=classify_identifier(entry.identifier, role_ids),
            )
            for entry in guild.permission_entries
        ]

    async def get_guild_members(self, db: AsyncSession, guild_id: str) -> list[MemberSchema]:
        await self._get_guild_or_404(db, guild_id)
        return [self._to_member(member) for member in await guild_repository.list_members(db, guild_id)]

    async def get_guild_roles(self, db: AsyncSession, guild_id: str) -> list[RoleResponse]:
        await self._get_guild_or_404(db, guild_id)
        roles = await role_repository.get_by_guild(db, guild_id)
        return [
            RoleResponse(
                role_id=role.role_id,
                role_name=role.role_name,
                permissions=role.discord_permissions,
                guild_id=role.guild_id,
            )
            for role in roles
        ]


guild_service = GuildService()
