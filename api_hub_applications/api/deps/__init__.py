"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_access_requests_service,
    get_applications_api_service,
    get_applications_credentials_service,
    get_applications_lifecycle_service,
    get_applications_search_service,
    get_config_service,
    get_crypto,
    get_deployments_service,
    get_events_service,
    get_hip_environment,
    get_service_cache,
    get_settings_dependency,
    get_stats_service,
    get_teams_service,
    get_users_service,
    verify_authorisation,
)

__all__ = [
    "get_access_requests_service",
    "get_applications_api_service",
    "get_applications_credentials_service",
    "get_applications_lifecycle_service",
    "get_applications_search_service",
    "get_config_service",
    "get_crypto",
    "get_deployments_service",
    "get_events_service",
    "get_hip_environment",
    "get_service_cache",
    "get_settings_dependency",
    "get_stats_service",
    "get_teams_service",
    "get_users_service",
    "verify_authorisation",
]
