"""
User Service
Business logic for Discord users and session login.
"""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from kanbancord.core.exceptions import ConflictError, NotFoundError
from kanbancord.core.security import create_session_token
from kanbancord.models.user import User
from kanbancord.repositories.user import user_repository
from kanbancord.schemas.auth import LoginResponse, SessionUser
from kanbancord.schemas.guild import GuildResponse
from kanbancord.schemas.user import UserCreate, UserResponse, UserUpdate
from kanbancord.services.guild import guild_service

logger = structlog.get_logger()


class UserService:
    def _to_user_response(self, user: User) -> UserResponse:
        return UserResponse(
            user_id=user.user_id,
            username=user.username,
            global_name=user.global_name,
            user_avatar=user.user_avatar,
            guild_ids=list(user.guild_ids or []),
        )

    async def _get_user_or_404(self, db: AsyncSession, user_id: str) -> User:
        user = await user_repository.get(db, id=user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    async def list_users(self, db: AsyncSession, skip: int = 0, limit: int = 100) -> list[UserResponse]:
        users = await user_repository.get_multi(db, skip=skip, limit=limit)
        return [self._to_user_response(user) for user in users]

    async def get_user(self, db: AsyncSession, user_id: str) -> UserResponse:
        return self._to_user_response(await self._get_user_or_404(db, user_id))

    async def add_user(self, db: AsyncSession, data: UserCreate) -> UserResponse:
        if await user_repository.get(db, id=data.user_id):
            raise ConflictError("User already exists")
        user = await user_repository.create(db, obj_in=data.model_dump())
        return self._to_user_response(user)

    async def update_user(self, db: AsyncSession, user_id: str, data: UserUpdate) -> UserResponse:
        user = await self._get_user_or_404(db, user_id)
        user = await user_repository.update(db, db_obj=user, obj_in=data.model_dump(exclude_unset=True, exclude_none=True))
        return self._to_user_response(user)

    async def get_user_guilds(self, db: AsyncSession, user_id: str) -> list[GuildResponse]:
        """Guilds the user belongs to; every referenced guild must exist."""
        user = await self._get_user_or_404(db, user_id)
        return [await guild_service.get_guild(db, guild_id) for guild_id in user.guild_ids or []]

    async def login(self, db: AsyncSession, user_id: str) -> LoginResponse:
        user = await self._get_user_or_404(db, user_id)

        token = create_session_token(user.user_id, username=user.username, global_name=user.global_name)

        logger.info("User logged in", user_id=user.user_id)
        return LoginResponse(
            token=token,
            user=SessionUser(user_id=user.user_id, username=user.username, global_name=user.global_name),
        )


user_service = UserService()
