"""
Board Model
Kanban boards and their per-board permission entries
"""

from sqlalchemy import Column, String
from sqlalchemy.orm import validates

from kanbancord.core.exceptions import BoardValidationError
from kanbancord.core.rbac import PermissionEntry
from kanbancord.models.base import BaseModel, JSONType


class Board(BaseModel):
    """
    A kanban board owned by one guild.

    Name, creator, guild and permissions are required at construction and
    validated again on every assignment.
    """
    __tablename__ = "boards"

    board_id = Column(String(64), primary_key=True)
    board_name = Column(String(200), nullable=False)
    created_by_user_id = Column(String(32), nullable=False)
    # Weak reference; boards are looked up by guild, not joined
    guild_id = Column(String(32), nullable=False, index=True)
    column_ids = Column(JSONType, default=list, nullable=False)
    permissions = Column(JSONType, nullable=False)

    _required_fields = (
        ("board_name", "Board name cannot be empty."),
        ("created_by_user_id", "Created by user ID cannot be empty."),
        ("guild_id", "Guild ID cannot be empty."),
        ("permissions", "Permissions cannot be empty."),
    )

    def __init__(self, **kwargs):
        # Assignment validators never fire for omitted fields
        for field, message in self._required_fields:
            if not kwargs.get(field):
                raise BoardValidationError(message)
        super().__init__(**kwargs)

    def __repr__(self):
        return f"<Board(board_id='{self.board_id}', board_name='{self.board_name}')>"

    @validates("board_name")
    def _validate_board_name(self, key, value):
        if not value or not value.strip():
            raise BoardValidationError("Board name cannot be empty.")
        return value

    @validates("created_by_user_id")
    def _validate_created_by(self, key, value):
        if not value:
            raise BoardValidationError("Created by user ID cannot be empty.")
        return value

    @validates("guild_id")
    def _validate_guild_id(self, key, value):
        if not value:
            raise BoardValidationError("Guild ID cannot be empty.")
        return value

    @validates("permissions")
    def _validate_permissions(self, key, value):
        if not value:
            raise BoardValidationError("Permissions cannot be empty.")
        return value

    @property
    def permission_entries(self) -> list[PermissionEntry]:
        return [PermissionEntry.from_dict(entry) for entry in self.permissions or []]
