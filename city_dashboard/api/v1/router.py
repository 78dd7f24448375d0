"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from city_dashboard.api.v1.dependencies.
"""

from fastapi import APIRouter

from city_dashboard.api.v1.endpoints import dashboard, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
