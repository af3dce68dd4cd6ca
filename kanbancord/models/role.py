"""
Role Model
Discord roles and the Discord permissions they confer
"""

from sqlalchemy import Column, String, ForeignKey
from kanbancord.core.rbac import DiscordPermission, convert_discord_permissions
from kanbancord.models.base import BaseModel, JSONType


class Role(BaseModel):
    """A guild role. ``permissions`` holds Discord permission names, never kanban capabilities"""
    __tablename__ = "roles"

    role_id = Column(String(32), primary_key=True)
    role_name = Column(String(100), nullable=False)
    permissions = Column(JSONType, default=list, nullable=False)
    guild_id = Column(String(32), ForeignKey("guilds.guild_id", ondelete="CASCADE"), nullable=False, index=True)

    def __repr__(self):
        return f"<Role(role_id='{self.role_id}', role_name='{self.role_name}')>"

    @property
    def discord_permissions(self) -> list[DiscordPermission]:
        return convert_discord_permissions(self.permissions or [])
