"""
User Repository
Database operations for Discord users.
"""

from __future__ import annotations

from kanbancord.models.user import User
from kanbancord.repositories.base import CRUDBase


class UserRepository(CRUDBase[User]):
    pass


user_repository = UserRepository(User, "user_id")
