"""
API v1 Router
Main router for all API v1 endpoints
"""

from fastapi import APIRouter
from kanbancord.api.v1.endpoints import auth, boards, guilds, health, roles, users

api_router = APIRouter()

# Authentication endpoints
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["authentication"]
)

# User endpoints and resolved permissions
api_router.include_router(
    users.router,
    prefix="/users",
    tags=["users"]
)

# Guild settings, members and roles
api_router.include_router(
    guilds.router,
    prefix="/guilds",
    tags=["guilds"]
)

api_router.include_router(
    roles.router,
    prefix="/roles",
    tags=["roles"]
)

api_router.include_router(
    boards.router,
    prefix="/boards",
    tags=["boards"]
)

# Health and monitoring endpoints
api_router.include_router(
    health.router,
    prefix="/health",
    tags=["health"]
)
