"""
Tests for guild, role and board services against a SQLite database
"""

import pytest

from conftest import entry
from kanbancord.core.exceptions import ConflictError, NotFoundError
from kanbancord.core.permission_resolver import PermissionResolver
from kanbancord.core.permission_store import DatabasePermissionStore
from kanbancord.core.rbac import IdentifierKind, KanbanPermission
from kanbancord.schemas.board import BoardCreate
from kanbancord.schemas.guild import GuildCreate, GuildUpdate
from kanbancord.schemas.permission import PermissionEntrySchema
from kanbancord.schemas.role import RoleCreate
from kanbancord.services.board import board_service
from kanbancord.services.guild import guild_service
from kanbancord.services.role import role_service

VIEW = KanbanPermission.VIEW_BOARD
EDIT = KanbanPermission.EDIT_BOARD
ADMIN = KanbanPermission.ADMINISTRATOR


def _guild_create(**overrides):
    data = {
        "guildId": "g1",
        "guildName": "Guild One",
        "guildOwnerId": "u1",
        "settings": [entry("VIEW_CHANNEL", VIEW)],
        "members": [{"userId": "u2", "roleIds": ["r1"]}],
    }
    data.update(overrides)
    return GuildCreate.model_validate(data)


async def _seed(db):
    await guild_service.add_guild(db, _guild_create())
    await role_service.create_role(
        db, RoleCreate(role_id="r1", role_name="Viewers", permissions=["VIEW_CHANNEL"], guild_id="g1")
    )


# ==================== Guilds ====================

class TestGuildService:
    """Test guild registration and settings normalization"""

    @pytest.mark.asyncio
    async def test_add_guild_appends_admin_entry(self, db):
        guild = await guild_service.add_guild(db, _guild_create())

        assert [s.identifier for s in guild.settings] == ["VIEW_CHANNEL", "ADMINISTRATOR"]
        assert guild.settings[-1].kanban_permission == [ADMIN]
        assert [m.user_id for m in guild.members] == ["u2"]

    @pytest.mark.asyncio
    async def test_add_guild_keeps_existing_admin_entry(self, db):
        guild = await guild_service.add_guild(db, _guild_create(settings=[entry("ADMINISTRATOR", VIEW, ADMIN)]))

        assert len(guild.settings) == 1
        assert guild.settings[0].kanban_permission == [VIEW, ADMIN]

    @pytest.mark.asyncio
    async def test_add_guild_twice_conflicts(self, db):
        await guild_service.add_guild(db, _guild_create())

        with pytest.raises(ConflictError):
            await guild_service.add_guild(db, _guild_create())

    @pytest.mark.asyncio
    async def test_update_guild_reinjects_admin_entry(self, db):
        await guild_service.add_guild(db, _guild_create())

        updated = await guild_service.update_guild(
            db, "g1", GuildUpdate.model_validate({"settings": [entry("u2", EDIT)]})
        )

        assert [s.identifier for s in updated.settings] == ["u2", "ADMINISTRATOR"]
        assert updated.guild_owner_id == "u1"

    @pytest.mark.asyncio
    async def test_update_guild_replaces_members(self, db):
        await guild_service.add_guild(db, _guild_create())

        updated = await guild_service.update_guild(
            db, "g1", GuildUpdate.model_validate({"members": [{"userId": "u3", "roleIds": []}]})
        )

        assert [m.user_id for m in updated.members] == ["u3"]

    @pytest.mark.asyncio
    async def test_missing_guild_raises_not_found(self, db):
        with pytest.raises(NotFoundError):
            await guild_service.get_guild(db, "missing")

    @pytest.mark.asyncio
    async def test_guild_permissions_are_tagged(self, db):
        await guild_service.add_guild(
            db, _guild_create(settings=[entry("VIEW_CHANNEL", VIEW), entry("r1", EDIT), entry("u2", EDIT)])
        )
        await role_service.create_role(
            db, RoleCreate(role_id="r1", role_name="Editors", permissions=[], guild_id="g1")
        )

        tagged = await guild_service.get_guild_permissions(db, "g1")

        assert [(t.identifier, t.kind) for t in tagged] == [
            ("VIEW_CHANNEL", IdentifierKind.DISCORD_PERMISSION),
            ("r1", IdentifierKind.ROLE),
            ("u2", IdentifierKind.USER),
            ("ADMINISTRATOR", IdentifierKind.DISCORD_PERMISSION),
        ]


# ==================== Roles ====================

class TestRoleService:
    @pytest.mark.asyncio
    async def test_create_role_registers_on_guild(self, db):
        await _seed(db)

        guild = await guild_service.get_guild(db, "g1")

        assert guild.role_ids == ["r1"]

    @pytest.mark.asyncio
    async def test_create_role_in_missing_guild(self, db):
        with pytest.raises(NotFoundError):
            await role_service.create_role(
                db, RoleCreate(role_id="r1", role_name="Viewers", permissions=[], guild_id="missing")
            )

    @pytest.mark.asyncio
    async def test_deleted_role_leaves_member_without_its_permissions(self, db, session_factory):
        await _seed(db)
        resolver = PermissionResolver(DatabasePermissionStore(session_factory))
        assert await resolver.resolve_guild_capabilities("u2", "g1") == {VIEW}

        await role_service.delete_role(db, "r1")

        assert await resolver.resolve_guild_capabilities("u2", "g1") == frozenset()
        members = await guild_service.get_guild_members(db, "g1")
        assert members[0].role_ids == ["r1"]


# ==================== Boards ====================

class TestBoardService:
    """Test board creation and permission snapshots"""

    @pytest.mark.asyncio
    async def test_board_without_permissions_copies_guild_settings(self, db):
        await _seed(db)

        board = await board_service.create_board(
            db, BoardCreate(board_name="Sprint", guild_id="g1"), created_by_user_id="u1"
        )

        assert board.created_by_user_id == "u1"
        assert [(p.identifier, p.kanban_permission) for p in board.permissions] == [
            ("VIEW_CHANNEL", [VIEW]),
            ("ADMINISTRATOR", [ADMIN]),
        ]
        guild = await guild_service.get_guild(db, "g1")
        assert guild.board_ids == [board.board_id]

    @pytest.mark.asyncio
    async def test_later_guild_changes_do_not_touch_board(self, db):
        await _seed(db)
        board = await board_service.create_board(
            db, BoardCreate(board_name="Sprint", guild_id="g1"), created_by_user_id="u1"
        )

        await guild_service.update_guild(db, "g1", GuildUpdate.model_validate({"settings": [entry("u9", EDIT)]}))

        reloaded = await board_service.get_board(db, board.board_id)
        assert [p.identifier for p in reloaded.permissions] == ["VIEW_CHANNEL", "ADMINISTRATOR"]

    @pytest.mark.asyncio
    async def test_board_with_explicit_permissions(self, db):
        await _seed(db)

        board = await board_service.create_board(
            db,
            BoardCreate(
                board_name="Private",
                guild_id="g1",
                permissions=[PermissionEntrySchema(identifier="u2", kanban_permission=[EDIT])],
            ),
            created_by_user_id="u1",
        )

        assert [(p.identifier, p.kanban_permission) for p in board.permissions] == [("u2", [EDIT])]

    @pytest.mark.asyncio
    async def test_board_in_missing_guild(self, db):
        with pytest.raises(NotFoundError):
            await board_service.create_board(
                db, BoardCreate(board_name="Sprint", guild_id="missing"), created_by_user_id="u1"
            )

    @pytest.mark.asyncio
    async def test_delete_board_unregisters_from_guild(self, db):
        await _seed(db)
        board = await board_service.create_board(
            db, BoardCreate(board_name="Sprint", guild_id="g1"), created_by_user_id="u1"
        )

        await board_service.delete_board(db, board.board_id)

        guild = await guild_service.get_guild(db, "g1")
        assert guild.board_ids == []
        with pytest.raises(NotFoundError):
            await board_service.get_board(db, board.board_id)
