"""
Tests for model-level validation and stored permission parsing
"""

import pytest

from conftest import entry
from kanbancord.core.exceptions import BoardValidationError
from kanbancord.core.rbac import DiscordPermission, KanbanPermission
from kanbancord.models import Board, Guild, Role


def _board(**overrides):
    fields = {
        "board_id": "b1",
        "board_name": "Sprint",
        "created_by_user_id": "u1",
        "guild_id": "g1",
        "column_ids": [],
        "permissions": [entry("u1", KanbanPermission.VIEW_BOARD)],
    }
    fields.update(overrides)
    return Board(**fields)


class TestBoardValidation:
    """Test that an invalid board cannot be constructed"""

    def test_valid_board(self):
        board = _board()

        assert board.board_name == "Sprint"
        assert board.permission_entries[0].kanban_permissions == {KanbanPermission.VIEW_BOARD}

    @pytest.mark.parametrize(
        "field, value, message",
        [
            ("board_name", "", "Board name cannot be empty."),
            ("board_name", "   ", "Board name cannot be empty."),
            ("created_by_user_id", "", "Created by user ID cannot be empty."),
            ("guild_id", "", "Guild ID cannot be empty."),
            ("permissions", [], "Permissions cannot be empty."),
        ],
    )
    def test_rejects_empty_field(self, field, value, message):
        with pytest.raises(BoardValidationError) as exc_info:
            _board(**{field: value})

        assert exc_info.value.message == message

    @pytest.mark.parametrize(
        "field, message",
        [
            ("board_name", "Board name cannot be empty."),
            ("created_by_user_id", "Created by user ID cannot be empty."),
            ("guild_id", "Guild ID cannot be empty."),
            ("permissions", "Permissions cannot be empty."),
        ],
    )
    def test_rejects_omitted_field(self, field, message):
        fields = {
            "board_id": "b1",
            "board_name": "Sprint",
            "created_by_user_id": "u1",
            "guild_id": "g1",
            "permissions": [entry("u1", KanbanPermission.VIEW_BOARD)],
        }
        del fields[field]

        with pytest.raises(BoardValidationError) as exc_info:
            Board(**fields)

        assert exc_info.value.message == message

    def test_validation_applies_on_assignment(self):
        board = _board()

        with pytest.raises(BoardValidationError):
            board.permissions = []


def test_guild_permission_entries_follow_stored_order():
    guild = Guild(
        guild_id="g1",
        guild_name="Guild",
        guild_owner_id="u1",
        settings=[entry("r1", KanbanPermission.EDIT_BOARD), entry("ADMINISTRATOR", KanbanPermission.ADMINISTRATOR)],
    )

    assert [e.identifier for e in guild.permission_entries] == ["r1", "ADMINISTRATOR"]


def test_role_ignores_unknown_discord_permission_names():
    role = Role(role_id="r1", role_name="Mods", permissions=["KICK_MEMBERS", "SOME_FUTURE_FLAG"], guild_id="g1")

    assert role.discord_permissions == [DiscordPermission.KICK_MEMBERS]
