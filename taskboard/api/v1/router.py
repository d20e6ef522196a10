"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from taskboard.api.v1.dependencies.
"""

from fastapi import APIRouter

from taskboard.api.v1.endpoints import (
    approvals,
    employees,
    health,
    me,
    permissions,
    public_approvals,
    tasks,
    users,
    websocket as ws_endpoint,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(
    approvals.router, prefix="/approval-requests", tags=["approvals"]
)
api_router.include_router(
    public_approvals.router, prefix="/public/approvals", tags=["public-approvals"]
)
api_router.include_router(
    permissions.router, prefix="/permissions", tags=["permissions"]
)
api_router.include_router(me.router, prefix="/me", tags=["me"])
api_router.include_router(employees.router, prefix="/employees", tags=["employees"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(ws_endpoint.router, tags=["websocket"])
