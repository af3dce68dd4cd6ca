"""
Tests for the permission vocabulary and the authorization gate
"""

import pytest

from kanbancord.core.exceptions import InvalidPermissionError
from kanbancord.core.rbac import (
    ADMINISTRATOR_ENTRY,
    DiscordPermission,
    IdentifierKind,
    KanbanPermission,
    PermissionEntry,
    classify_identifier,
    convert_discord_permissions,
    ensure_admin_entry,
    is_allowed,
    parse_discord_permission,
    parse_kanban_permission,
)


# ==================== Vocabulary ====================

class TestParsing:
    """Test parsing of Discord and kanban permission names"""

    def test_kanban_permission_accepts_wire_label(self):
        assert parse_kanban_permission("View Board") is KanbanPermission.VIEW_BOARD

    def test_kanban_permission_accepts_member_name(self):
        assert parse_kanban_permission("MANAGE_BOARD_PERMISSIONS") is KanbanPermission.MANAGE_BOARD_PERMISSIONS

    def test_kanban_permission_passes_members_through(self):
        assert parse_kanban_permission(KanbanPermission.ADMINISTRATOR) is KanbanPermission.ADMINISTRATOR

    @pytest.mark.parametrize("value", ["Fly Board", "", "view board", None, 3])
    def test_kanban_permission_rejects_unknown(self, value):
        with pytest.raises(InvalidPermissionError):
            parse_kanban_permission(value)

    def test_discord_permission_parses_name(self):
        assert parse_discord_permission("MANAGE_GUILD") is DiscordPermission.MANAGE_GUILD

    def test_discord_permission_rejects_kanban_label(self):
        with pytest.raises(InvalidPermissionError):
            parse_discord_permission("View Board")

    def test_convert_discord_permissions_drops_unknown_names(self):
        converted = convert_discord_permissions(["VIEW_CHANNEL", "NOT_A_FLAG", "ADMINISTRATOR"])

        assert converted == [DiscordPermission.VIEW_CHANNEL, DiscordPermission.ADMINISTRATOR]

    def test_invalid_permission_error_is_a_value_error(self):
        assert issubclass(InvalidPermissionError, ValueError)


class TestPermissionEntry:
    """Test conversion between stored dicts and entries"""

    def test_from_dict_parses_capabilities(self):
        entry = PermissionEntry.from_dict({"identifier": "u1", "kanbanPermission": ["View Board", "Edit Board"]})

        assert entry.identifier == "u1"
        assert entry.kanban_permissions == {KanbanPermission.VIEW_BOARD, KanbanPermission.EDIT_BOARD}

    def test_from_dict_rejects_unknown_capability(self):
        with pytest.raises(InvalidPermissionError):
            PermissionEntry.from_dict({"identifier": "u1", "kanbanPermission": ["Fly"]})

    def test_from_dict_rejects_missing_identifier(self):
        with pytest.raises(InvalidPermissionError):
            PermissionEntry.from_dict({"kanbanPermission": ["View Board"]})

    def test_to_dict_uses_declaration_order(self):
        entry = PermissionEntry(
            identifier="r1",
            kanban_permissions=frozenset({KanbanPermission.ADMINISTRATOR, KanbanPermission.VIEW_BOARD}),
        )

        assert entry.to_dict() == {"identifier": "r1", "kanbanPermission": ["View Board", "Administrator"]}


# ==================== Guild settings ====================

class TestEnsureAdminEntry:
    """Test the ADMINISTRATOR entry injected into guild settings"""

    def test_empty_settings_get_admin_entry(self):
        assert ensure_admin_entry([]) == [ADMINISTRATOR_ENTRY]

    def test_admin_entry_is_appended_after_existing_entries(self):
        viewer = PermissionEntry("VIEW_CHANNEL", frozenset({KanbanPermission.VIEW_BOARD}))

        assert ensure_admin_entry([viewer]) == [viewer, ADMINISTRATOR_ENTRY]

    def test_existing_admin_keyed_entry_is_kept_as_is(self):
        custom = PermissionEntry("ADMINISTRATOR", frozenset({KanbanPermission.VIEW_BOARD}))

        normalized = ensure_admin_entry([custom])

        assert normalized == [custom]

    def test_is_idempotent(self):
        once = ensure_admin_entry([])

        assert ensure_admin_entry(once) == once


class TestClassifyIdentifier:
    """Test tagging of untagged identifiers"""

    def test_discord_permission(self):
        assert classify_identifier("MANAGE_GUILD", ["r1"]) is IdentifierKind.DISCORD_PERMISSION

    def test_role(self):
        assert classify_identifier("r1", ["r1", "r2"]) is IdentifierKind.ROLE

    def test_anything_else_is_a_user(self):
        assert classify_identifier("123456789", ["r1"]) is IdentifierKind.USER


# ==================== Gate ====================

def _other_than(required):
    return next(
        p for p in KanbanPermission
        if p is not required and p is not KanbanPermission.ADMINISTRATOR
    )


class TestIsAllowed:
    """Test the single authorization rule"""

    @pytest.mark.parametrize("required", list(KanbanPermission))
    def test_empty_set_denies(self, required):
        assert is_allowed(required, frozenset()) is False

    @pytest.mark.parametrize("required", list(KanbanPermission))
    def test_exact_capability_allows(self, required):
        assert is_allowed(required, {required}) is True

    @pytest.mark.parametrize("required", list(KanbanPermission))
    def test_administrator_allows_everything(self, required):
        assert is_allowed(required, {KanbanPermission.ADMINISTRATOR}) is True

    @pytest.mark.parametrize("required", list(KanbanPermission))
    def test_unrelated_capability_denies(self, required):
        assert is_allowed(required, {_other_than(required)}) is False

    def test_required_administrator_needs_administrator(self):
        granted = set(KanbanPermission) - {KanbanPermission.ADMINISTRATOR}

        assert is_allowed(KanbanPermission.ADMINISTRATOR, granted) is False
