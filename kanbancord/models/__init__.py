"""
SQLAlchemy Models Package
KanbanCord Database Models
"""

from kanbancord.models.board import Board
from kanbancord.models.guild import Guild, GuildMember
from kanbancord.models.role import Role
from kanbancord.models.user import User

__all__ = [
    "Board",
    "Guild",
    "GuildMember",
    "Role",
    "User",
]
