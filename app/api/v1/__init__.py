"""API v1 routes."""

from fastapi import APIRouter, Depends

from app.api.v1 import admins, health, permissions, roles, users
from app.api.v1.auth import require_identity

protected = [Depends(require_identity)]

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(admins.router, prefix="/admins", tags=["admins"], dependencies=protected)
router.include_router(users.router, prefix="/users", tags=["users"], dependencies=protected)
router.include_router(roles.router, prefix="/roles", tags=["roles"], dependencies=protected)
router.include_router(
    permissions.router, prefix="/permissions", tags=["permissions"], dependencies=protected
)
