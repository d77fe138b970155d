"""
API routes module.

FastAPI routers for all HTTP endpoints.
"""

from fastapi import APIRouter

from .routers import (
    access_requests_router,
    applications_router,
    config_router,
    deployments_router,
    events_router,
    health_router,
    stats_router,
    teams_router,
    users_router,
)

api_router = APIRouter()

# Include all routers
api_router.include_router(health_router)
api_router.include_router(applications_router)
api_router.include_router(access_requests_router)
api_router.include_router(teams_router)
api_router.include_router(events_router)
api_router.include_router(users_router)
api_router.include_router(stats_router)
api_router.include_router(config_router)
api_router.include_router(deployments_router)

__all__ = ["api_router"]
