"""
Shared fixtures for the KanbanCord test suite
"""

import asyncio
import os

# Must be set before kanbancord.core.config is imported
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET_KEY", "kanbancord-test-secret-0123456789abcdef0123456789abcdef")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from kanbancord.core.database import Base, get_db
from kanbancord.core.deps import get_permission_store
from kanbancord.core.permission_store import DatabasePermissionStore, PermissionStore
from kanbancord.models import Board, Guild, GuildMember, Role


class FakePermissionStore(PermissionStore):
    """In-memory store that also records how role lookups overlap"""

    def __init__(self) -> None:
        self.guilds: dict[str, Guild] = {}
        self.boards: dict[str, Board] = {}
        self.roles: dict[str, Role] = {}
        self.members: dict[str, list[GuildMember]] = {}
        self.role_delay = 0.0
        self.role_errors: dict[str, Exception] = {}
        self.role_lookups: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def add_guild(self, guild_id, owner_id, settings=(), members=None) -> Guild:
        guild = Guild(
            guild_id=guild_id,
            guild_name=f"Guild {guild_id}",
            guild_owner_id=owner_id,
            settings=list(settings),
            role_ids=[],
            board_ids=[],
        )
        self.guilds[guild_id] = guild
        self.members[guild_id] = [
            GuildMember(guild_id=guild_id, user_id=user_id, role_ids=list(role_ids))
            for user_id, role_ids in (members or {}).items()
        ]
        return guild

    def add_role(self, role_id, guild_id, permissions) -> Role:
        role = Role(role_id=role_id, role_name=f"Role {role_id}", permissions=list(permissions), guild_id=guild_id)
        self.roles[role_id] = role
        return role

    def add_board(self, board_id, guild_id, created_by, permissions) -> Board:
        board = Board(
            board_id=board_id,
            board_name=f"Board {board_id}",
            created_by_user_id=created_by,
            guild_id=guild_id,
            column_ids=[],
            permissions=list(permissions),
        )
        self.boards[board_id] = board
        return board

    async def get_guild(self, guild_id):
        return self.guilds.get(guild_id)

    async def get_board(self, board_id):
        return self.boards.get(board_id)

    async def get_role(self, role_id):
        self.role_lookups.append(role_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.role_delay:
                await asyncio.sleep(self.role_delay)
            if role_id in self.role_errors:
                raise self.role_errors[role_id]
            return self.roles.get(role_id)
        finally:
            self.in_flight -= 1

    async def list_members(self, guild_id):
        return list(self.members.get(guild_id, []))


def entry(identifier, *permissions):
    """Stored permission entry in wire form"""
    return {"identifier": identifier, "kanbanPermission": [p.value for p in permissions]}


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def store():
    return FakePermissionStore()


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """Fresh SQLite database file per test"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'kanbancord-test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client against the app, backed by the per-test database"""
    from kanbancord.main import app

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_permission_store] = lambda: DatabasePermissionStore(session_factory)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client

    app.dependency_overrides.clear()
