"""
User Model
Discord users known to the board application
"""

from sqlalchemy import Column, String
from kanbancord.models.base import BaseModel, JSONType


class User(BaseModel):
    """A Discord user; IDs are Discord snowflakes"""
    __tablename__ = "users"

    user_id = Column(String(32), primary_key=True)
    username = Column(String(100), nullable=False)
    global_name = Column(String(100), nullable=True)
    user_avatar = Column(String(500), nullable=True)

    # Guilds the user belongs to
    guild_ids = Column(JSONType, default=list, nullable=False)

    def __repr__(self):
        return f"<User(user_id='{self.user_id}', username='{self.username}')>"
