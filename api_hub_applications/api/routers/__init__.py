"""API routers."""

from .access_requests import router as access_requests_router
from .applications import router as applications_router
from .config import router as config_router
from .deployments import router as deployments_router
from .events import router as events_router
from .health import router as health_router
from .stats import router as stats_router
from .teams import router as teams_router
from .users import router as users_router

__all__ = [
    "access_requests_router",
    "applications_router",
    "config_router",
    "deployments_router",
    "events_router",
    "health_router",
    "stats_router",
    "teams_router",
    "users_router",
]
