"""Service orchestrators."""

from .access_requests_event_service import AccessRequestsEventService
from .access_requests_service import AccessRequestsService
from .api_event_service import ApiEventService
from .applications_api_service import ApplicationsApiService
from .applications_credentials_service import ApplicationsCredentialsService
from .applications_event_service import ApplicationsEventService
from .applications_lifecycle_service import ApplicationsLifecycleService
from .applications_search_service import ApplicationsSearchService
from .config_service import ConfigService
from .deployments_service import DeploymentsService
from .events_service import EventsService
from .stats_service import StatsService
from .teams_event_service import TeamsEventService
from .teams_service import TeamsService
from .users_service import UsersService

__all__ = [
    "AccessRequestsEventService",
    "AccessRequestsService",
    "ApiEventService",
    "ApplicationsApiService",
    "ApplicationsCredentialsService",
    "ApplicationsEventService",
    "ApplicationsLifecycleService",
    "ApplicationsSearchService",
    "ConfigService",
    "DeploymentsService",
    "EventsService",
    "StatsService",
    "TeamsEventService",
    "TeamsService",
    "UsersService",
]
