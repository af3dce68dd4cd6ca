"""
FastAPI Dependencies
Authentication, permission resolution and the authorization gate
"""

from typing import Optional
from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import structlog

from kanbancord.core.database import AsyncSessionLocal
from kanbancord.core.exceptions import ForbiddenError, UnauthorizedError
from kanbancord.core.permission_resolver import PermissionResolver
from kanbancord.core.permission_store import DatabasePermissionStore, PermissionStore
from kanbancord.core.rbac import KanbanPermission, is_allowed
from kanbancord.core.security import SessionClaims, verify_session_token

logger = structlog.get_logger()

security = HTTPBearer(auto_error=False)


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> SessionClaims:
    """
    Identity of the caller from the bearer session token

    Raises:
        UnauthorizedError: If the token is missing or fails verification
    """
    if not credentials:
        logger.warning("Missing authentication credentials")
        raise UnauthorizedError("Unauthorized access")

    return verify_session_token(credentials.credentials)


def get_permission_store() -> PermissionStore:
    return DatabasePermissionStore(AsyncSessionLocal)


def get_permission_resolver(
    store: PermissionStore = Depends(get_permission_store)
) -> PermissionResolver:
    return PermissionResolver(store)


def ensure_allowed(required: KanbanPermission, granted: frozenset[KanbanPermission], **context) -> None:
    """Apply the gate to a resolved capability set, raising ForbiddenError on deny."""
    if not is_allowed(required, granted):
        logger.warning(
            "Kanban permission denied",
            required=required.value,
            granted=sorted(p.value for p in granted),
            **context,
        )
        raise ForbiddenError(f"Permission required: {required.value}")


async def authorize_guild(
    resolver: PermissionResolver,
    identity: SessionClaims,
    guild_id: str,
    required: KanbanPermission,
) -> frozenset[KanbanPermission]:
    granted = await resolver.resolve_guild_capabilities(identity.user_id, guild_id)
    ensure_allowed(required, granted, user_id=identity.user_id, guild_id=guild_id)
    return granted


async def authorize_board(
    resolver: PermissionResolver,
    identity: SessionClaims,
    board_id: str,
    required: KanbanPermission,
) -> frozenset[KanbanPermission]:
    granted = await resolver.resolve_board_capabilities(identity.user_id, board_id)
    ensure_allowed(required, granted, user_id=identity.user_id, board_id=board_id)
    return granted


def require_guild_permission(required: KanbanPermission):
    """
    Dependency factory guarding routes with a ``guild_id`` path parameter

    Args:
        required: Capability the caller must hold in the guild

    Returns:
        Dependency resolving to the caller's identity
    """
    async def guild_permission_checker(
        guild_id: str,
        identity: SessionClaims = Depends(get_current_identity),
        resolver: PermissionResolver = Depends(get_permission_resolver),
    ) -> SessionClaims:
        await authorize_guild(resolver, identity, guild_id, required)
        return identity

    return guild_permission_checker


def require_board_permission(required: KanbanPermission):
    """
    Dependency factory guarding routes with a ``board_id`` path parameter

    Args:
        required: Capability the caller must hold on the board

    Returns:
        Dependency resolving to the caller's identity
    """
    async def board_permission_checker(
        board_id: str,
        identity: SessionClaims = Depends(get_current_identity),
        resolver: PermissionResolver = Depends(get_permission_resolver),
    ) -> SessionClaims:
        await authorize_board(resolver, identity, board_id, required)
        return identity

    return board_permission_checker
