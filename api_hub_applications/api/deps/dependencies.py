"""
Dependency injection container.

Factory functions for FastAPI dependencies: the shared HTTP client and
encrypter, repositories, connectors and services, plus the request guards
(internal auth, HIP environment path parameters, encrypted emails).

Dependencies: api_hub_applications.configs, api_hub_applications.application, api_hub_applications.boundary
System role: DI container for service injection
"""

import logging
from functools import lru_cache

import httpx
from fastapi import Depends, Header, HTTPException, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from api_hub_applications.application.helpers.scope_fixer import ScopeFixer
from api_hub_applications.application.services import (
    AccessRequestsEventService,
    AccessRequestsService,
    ApiEventService,
    ApplicationsApiService,
    ApplicationsCredentialsService,
    ApplicationsEventService,
    ApplicationsLifecycleService,
    ApplicationsSearchService,
    ConfigService,
    DeploymentsService,
    EventsService,
    StatsService,
    TeamsEventService,
    TeamsService,
    UsersService,
)
from api_hub_applications.boundary.connectors import (
    ApimConnector,
    AutopublishConnector,
    EmailConnector,
    IdmsConnector,
    IntegrationCatalogueConnector,
    InternalAuthConnector,
)
from api_hub_applications.boundary.connectors.internal_auth_connector import InternalAuthException
from api_hub_applications.boundary.db import get_database
from api_hub_applications.boundary.db.CRUD import AccessRequestCRUD, ApplicationCRUD, EventCRUD, TeamCRUD
from api_hub_applications.configs import HipEnvironment, HipEnvironments, Settings, get_hip_environments, get_settings
from api_hub_applications.core.crypto import SensitiveCrypto
from api_hub_applications.core.exceptions import DecryptionException

logger = logging.getLogger(__name__)


class ServiceCache:
    """Container for cached process-wide clients."""

    def __init__(self):
        self._http_client = None
        self._crypto = None

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Get cached HTTP client shared by all connectors."""
        if self._http_client is None:
            settings = get_settings()
            self._http_client = httpx.AsyncClient(timeout=settings.services.request_timeout_seconds)
        return self._http_client

    @property
    def crypto(self) -> SensitiveCrypto:
        """Get cached field encrypter."""
        if self._crypto is None:
            self._crypto = SensitiveCrypto.from_base64(get_settings().crypto.key)
        return self._crypto

    async def aclose(self) -> None:
        """Close the HTTP client, if one was opened."""
        if self._http_client is not None:
            await self._http_client.aclose()
        self.clear()

    def clear(self) -> None:
        """Clear all cached instances."""
        self._http_client = None
        self._crypto = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_hip_environments_dependency() -> HipEnvironments:
    return get_hip_environments()


def get_http_client() -> httpx.AsyncClient:
    return get_service_cache().http_client


def get_crypto() -> SensitiveCrypto:
    return get_service_cache().crypto


# Request guards


def get_internal_auth_connector(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings_dependency),
) -> InternalAuthConnector:
    return InternalAuthConnector(client, settings.services.internal_auth_url)


async def verify_authorisation(
    authorization: str | None = Header(default=None),
    settings: Settings = Depends(get_settings_dependency),
    connector: InternalAuthConnector = Depends(get_internal_auth_connector),
) -> None:
    """
    Require a token accepted by internal-auth when SERVICES_AUTH_ENABLED is set.

    Raises:
        HTTPException(401): Missing or rejected token
        HTTPException(502): internal-auth could not be reached
    """
    if not settings.services.auth_enabled:
        return

    if not authorization:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing Authorization header")

    try:
        authorised = await connector.authorise(authorization)
    except InternalAuthException as e:
        logger.error("Internal auth unavailable", extra={"error": str(e)})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e

    if not authorised:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authorised")


def get_hip_environment(
    environment_id: str,
    hip_environments: HipEnvironments = Depends(get_hip_environments_dependency),
) -> HipEnvironment:
    """Resolve an {environment_id} path parameter, 404 when it is not configured."""
    environment = hip_environments.for_url_path_parameter(environment_id)
    if environment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Cannot find HIP environment with id {environment_id}",
        )
    return environment


def get_query_environment(
    environment: str = Query(...),
    hip_environments: HipEnvironments = Depends(get_hip_environments_dependency),
) -> HipEnvironment:
    return get_hip_environment(environment, hip_environments)


def decrypt_email(crypto: SensitiveCrypto, encrypted: str) -> str:
    """
    Decrypt an email supplied in a path or query parameter.

    Raises:
        HTTPException(400): Value was not produced by our encrypter
    """
    try:
        return crypto.decrypt(encrypted)
    except DecryptionException as e:
        logger.warning("Unable to decrypt email parameter", extra={"error": e.message})
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unable to decrypt email") from e


SYSTEM_USER = "api-hub-applications"


def get_user_email(user_email: str = Query(default=SYSTEM_USER, alias="userEmail")) -> str:
    """Acting user for the audit trail, when the caller supplies one."""
    return user_email


def get_team_member_filter(
    team_member: str | None = Query(default=None, alias="teamMember"),
    crypto: SensitiveCrypto = Depends(get_crypto),
) -> str | None:
    return decrypt_email(crypto, team_member) if team_member else None


# Repositories


def get_application_crud(
    db: AsyncIOMotorDatabase = Depends(get_database),
    crypto: SensitiveCrypto = Depends(get_crypto),
) -> ApplicationCRUD:
    return ApplicationCRUD(db[ApplicationCRUD.collection_name], crypto)


def get_team_crud(
    db: AsyncIOMotorDatabase = Depends(get_database),
    crypto: SensitiveCrypto = Depends(get_crypto),
) -> TeamCRUD:
    return TeamCRUD(db[TeamCRUD.collection_name], crypto)


def get_access_request_crud(
    db: AsyncIOMotorDatabase = Depends(get_database),
    crypto: SensitiveCrypto = Depends(get_crypto),
) -> AccessRequestCRUD:
    return AccessRequestCRUD(db[AccessRequestCRUD.collection_name], crypto)


def get_event_crud(
    db: AsyncIOMotorDatabase = Depends(get_database),
    crypto: SensitiveCrypto = Depends(get_crypto),
) -> EventCRUD:
    return EventCRUD(db[EventCRUD.collection_name], crypto)


# Connectors


def get_idms_connector(client: httpx.AsyncClient = Depends(get_http_client)) -> IdmsConnector:
    return IdmsConnector(client)


def get_apim_connector(
    client: httpx.AsyncClient = Depends(get_http_client),
    hip_environments: HipEnvironments = Depends(get_hip_environments_dependency),
) -> ApimConnector:
    return ApimConnector(client, hip_environments)


def get_email_connector(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings_dependency),
) -> EmailConnector:
    return EmailConnector(client, settings.services.email_url, settings.email_templates)


def get_integration_catalogue_connector(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings_dependency),
) -> IntegrationCatalogueConnector:
    return IntegrationCatalogueConnector(
        client,
        settings.services.integration_catalogue_url,
        settings.services.integration_catalogue_token,
    )


def get_autopublish_connector(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings_dependency),
) -> AutopublishConnector:
    return AutopublishConnector(client, settings.services.autopublish_url)


# Services


def get_events_service(
    repository: EventCRUD = Depends(get_event_crud),
    settings: Settings = Depends(get_settings_dependency),
) -> EventsService:
    """
    Get events service instance.

    Args:
        repository: Event persistence (injected via Depends)
        settings: Application settings, for EVENTS_ENABLED

    Returns:
        EventsService: Events service instance
    """
    return EventsService(repository=repository, enabled=settings.events.enabled)


def get_applications_search_service(
    repository: ApplicationCRUD = Depends(get_application_crud),
    teams_repository: TeamCRUD = Depends(get_team_crud),
    idms: IdmsConnector = Depends(get_idms_connector),
    hip_environments: HipEnvironments = Depends(get_hip_environments_dependency),
) -> ApplicationsSearchService:
    return ApplicationsSearchService(repository, teams_repository, idms, hip_environments)


def get_applications_credentials_service(
    repository: ApplicationCRUD = Depends(get_application_crud),
    idms: IdmsConnector = Depends(get_idms_connector),
    events_service: EventsService = Depends(get_events_service),
    hip_environments: HipEnvironments = Depends(get_hip_environments_dependency),
) -> ApplicationsCredentialsService:
    return ApplicationsCredentialsService(
        repository,
        idms,
        ApplicationsEventService(events_service),
        hip_environments,
    )


def get_access_requests_service(
    repository: AccessRequestCRUD = Depends(get_access_request_crud),
    search_service: ApplicationsSearchService = Depends(get_applications_search_service),
    credentials_service: ApplicationsCredentialsService = Depends(get_applications_credentials_service),
    email: EmailConnector = Depends(get_email_connector),
    events_service: EventsService = Depends(get_events_service),
) -> AccessRequestsService:
    """
    Get access requests service instance.

    Returns:
        AccessRequestsService: Access request service wired to the credentials service
    """
    return AccessRequestsService(
        repository,
        search_service,
        credentials_service,
        email,
        AccessRequestsEventService(events_service),
    )


def get_teams_service(
    repository: TeamCRUD = Depends(get_team_crud),
    email: EmailConnector = Depends(get_email_connector),
    events_service: EventsService = Depends(get_events_service),
) -> TeamsService:
    return TeamsService(repository, email, TeamsEventService(events_service))


def get_applications_lifecycle_service(
    repository: ApplicationCRUD = Depends(get_application_crud),
    search_service: ApplicationsSearchService = Depends(get_applications_search_service),
    teams_repository: TeamCRUD = Depends(get_team_crud),
    access_requests_service: AccessRequestsService = Depends(get_access_requests_service),
    idms: IdmsConnector = Depends(get_idms_connector),
    email: EmailConnector = Depends(get_email_connector),
    events_service: EventsService = Depends(get_events_service),
    hip_environments: HipEnvironments = Depends(get_hip_environments_dependency),
) -> ApplicationsLifecycleService:
    return ApplicationsLifecycleService(
        repository,
        search_service,
        teams_repository,
        access_requests_service,
        idms,
        email,
        ApplicationsEventService(events_service),
        hip_environments,
    )


def get_applications_api_service(
    repository: ApplicationCRUD = Depends(get_application_crud),
    search_service: ApplicationsSearchService = Depends(get_applications_search_service),
    access_requests_service: AccessRequestsService = Depends(get_access_requests_service),
    teams_service: TeamsService = Depends(get_teams_service),
    integration_catalogue: IntegrationCatalogueConnector = Depends(get_integration_catalogue_connector),
    idms: IdmsConnector = Depends(get_idms_connector),
    email: EmailConnector = Depends(get_email_connector),
    events_service: EventsService = Depends(get_events_service),
    hip_environments: HipEnvironments = Depends(get_hip_environments_dependency),
) -> ApplicationsApiService:
    return ApplicationsApiService(
        repository,
        search_service,
        access_requests_service,
        teams_service,
        ScopeFixer(integration_catalogue, idms, hip_environments),
        email,
        ApplicationsEventService(events_service),
    )


def get_users_service(
    applications_repository: ApplicationCRUD = Depends(get_application_crud),
    teams_repository: TeamCRUD = Depends(get_team_crud),
) -> UsersService:
    return UsersService(applications_repository, teams_repository)


def get_stats_service(
    apim: ApimConnector = Depends(get_apim_connector),
    integration_catalogue: IntegrationCatalogueConnector = Depends(get_integration_catalogue_connector),
    hip_environments: HipEnvironments = Depends(get_hip_environments_dependency),
) -> StatsService:
    return StatsService(apim, integration_catalogue, hip_environments)


def get_config_service(
    hip_environments: HipEnvironments = Depends(get_hip_environments_dependency),
) -> ConfigService:
    return ConfigService(hip_environments)


def get_deployments_service(
    apim: ApimConnector = Depends(get_apim_connector),
    integration_catalogue: IntegrationCatalogueConnector = Depends(get_integration_catalogue_connector),
    autopublish: AutopublishConnector = Depends(get_autopublish_connector),
    teams_service: TeamsService = Depends(get_teams_service),
    email: EmailConnector = Depends(get_email_connector),
    events_service: EventsService = Depends(get_events_service),
    hip_environments: HipEnvironments = Depends(get_hip_environments_dependency),
) -> DeploymentsService:
    return DeploymentsService(
        apim,
        integration_catalogue,
        autopublish,
        teams_service,
        email,
        ApiEventService(events_service),
        hip_environments,
    )
