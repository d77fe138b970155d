"""
Credential scope reconciliation.

Brings every credential's IDMS scopes into line with the APIs linked to
the application. Production-like environments only receive the scopes of
approved access requests.

Dependencies: api_hub_applications.boundary.connectors
System role: Keeps IDMS client scopes consistent with application state
"""

import asyncio
import logging

from api_hub_applications.application.helpers.use_first_exception import gather_all
from api_hub_applications.boundary.connectors.idms_connector import IdmsConnector
from api_hub_applications.boundary.connectors.integration_catalogue_connector import IntegrationCatalogueConnector
from api_hub_applications.configs.hip_environments import HipEnvironment, HipEnvironments
from api_hub_applications.core.exceptions import ApiNotFoundException
from api_hub_applications.models.access_request import AccessRequest, AccessRequestStatus
from api_hub_applications.models.application import Application, Credential
from api_hub_applications.models.application_lenses import credentials_for

logger = logging.getLogger(__name__)


class ScopeFixer:
    """Adds missing and removes surplus scopes on an application's credentials."""

    def __init__(
        self,
        integration_catalogue: IntegrationCatalogueConnector,
        idms: IdmsConnector,
        hip_environments: HipEnvironments,
    ) -> None:
        self.integration_catalogue = integration_catalogue
        self.idms = idms
        self.hip_environments = hip_environments

    async def fix(self, application: Application, access_requests: list[AccessRequest]) -> None:
        """
        Reconcile scopes for every credential of an application.

        Args:
            application: Application in its new state (APIs already added or removed)
            access_requests: All access requests raised by the application

        Raises:
            IdmsException: If IDMS cannot read or change a client's scopes
            IntegrationCatalogueException: If API details cannot be read
        """
        required = await self._required_scopes(application)
        await gather_all(
            self._fix_credential(environment, credential, self._allowed_scopes(environment, required, access_requests))
            for environment in self.hip_environments.environments
            for credential in credentials_for(application, environment.id)
        )
        logger.info(
            "Scopes fixed",
            extra={"application_id": application.safe_id, "required_scopes": len(required)},
        )

    async def _required_scopes(self, application: Application) -> set[str]:
        results = await asyncio.gather(
            *(self.integration_catalogue.find_by_id(api.id) for api in application.apis),
            return_exceptions=True,
        )

        scopes: set[str] = set()
        for api, result in zip(application.apis, results):
            if isinstance(result, ApiNotFoundException):
                logger.info(
                    "Ignoring API missing from the catalogue",
                    extra={"application_id": application.safe_id, "api_id": api.id},
                )
            elif isinstance(result, BaseException):
                raise result
            else:
                scopes |= result.required_scopes(application)
        return scopes

    @staticmethod
    def _allowed_scopes(
        environment: HipEnvironment,
        required: set[str],
        access_requests: list[AccessRequest],
    ) -> set[str]:
        if not environment.is_production_like:
            return required
        approved = {
            scope
            for access_request in access_requests
            if access_request.status == AccessRequestStatus.APPROVED
            and access_request.environment_id == environment.id
            for scope in access_request.scopes
        }
        return approved & required

    async def _fix_credential(self, environment: HipEnvironment, credential: Credential, allowed: set[str]) -> None:
        current = {
            scope.client_scope_id
            for scope in await self.idms.fetch_client_scopes(environment, credential.client_id)
        }
        await gather_all(
            [
                *(
                    self.idms.delete_client_scope(environment, credential.client_id, scope)
                    for scope in sorted(current - allowed)
                ),
                *(
                    self.idms.add_client_scope(environment, credential.client_id, scope)
                    for scope in sorted(allowed - current)
                ),
            ]
        )
