"""
Guild Models
Guilds, their permission settings and their members
"""

from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint

from kanbancord.core.rbac import PermissionEntry
from kanbancord.models.base import BaseModel, JSONType


class Guild(BaseModel):
    """A Discord guild and its kanban permission settings"""
    __tablename__ = "guilds"

    guild_id = Column(String(32), primary_key=True)
    guild_name = Column(String(100), nullable=False)
    guild_owner_id = Column(String(32), nullable=False)

    # Ordered list of {"identifier": str, "kanbanPermission": [str]}
    settings = Column(JSONType, default=list, nullable=False)
    role_ids = Column(JSONType, default=list, nullable=False)
    board_ids = Column(JSONType, default=list, nullable=False)

    def __repr__(self):
        return f"<Guild(guild_id='{self.guild_id}', guild_name='{self.guild_name}')>"

    @property
    def permission_entries(self) -> list[PermissionEntry]:
        return [PermissionEntry.from_dict(entry) for entry in self.settings or []]


class GuildMember(BaseModel):
    """Membership of a user in a guild; role IDs are weak references"""
    __tablename__ = "guild_members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    guild_id = Column(String(32), ForeignKey("guilds.guild_id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(32), nullable=False, index=True)
    role_ids = Column(JSONType, default=list, nullable=False)

    __table_args__ = (
        UniqueConstraint("guild_id", "user_id", name="uq_guild_member"),
    )

    def __repr__(self):
        return f"<GuildMember(guild_id='{self.guild_id}', user_id='{self.user_id}')>"
