"""
API deployments service.

Deploys, redeploys and promotes APIs through APIM, and keeps the
integration catalogue's owning team in step.

Dependencies: api_hub_applications.boundary.connectors
System role: API producer use cases
"""

import asyncio
import logging

from api_hub_applications.application.helpers.notifications import notify
from api_hub_applications.application.services.api_event_service import ApiEventService
from api_hub_applications.application.services.teams_service import TeamsService
from api_hub_applications.boundary.connectors.apim_connector import ApimConnector
from api_hub_applications.boundary.connectors.autopublish_connector import AutopublishConnector
from api_hub_applications.boundary.connectors.email_connector import EmailConnector
from api_hub_applications.boundary.connectors.integration_catalogue_connector import IntegrationCatalogueConnector
from api_hub_applications.configs.hip_environments import HipEnvironment, HipEnvironments
from api_hub_applications.core.exceptions import ApimException
from api_hub_applications.models.apim import (
    DeploymentDetails,
    DeploymentsRequest,
    DeploymentState,
    DeploymentStatus,
    EgressGateway,
    InvalidOasResponse,
    RedeploymentRequest,
    SuccessfulDeploymentResponse,
    SuccessfulDeploymentsResponse,
    SuccessfulValidateResponse,
)
from api_hub_applications.models.common import utc_now
from api_hub_applications.models.integration_catalogue import ApiTeam

logger = logging.getLogger(__name__)

NOT_DEPLOYED_VERSION = "not deployed"
UNKNOWN_VERSION = "unknown"


class DeploymentsService:
    """API deployment, promotion and ownership."""

    def __init__(
        self,
        apim: ApimConnector,
        integration_catalogue: IntegrationCatalogueConnector,
        autopublish: AutopublishConnector,
        teams_service: TeamsService,
        email: EmailConnector,
        event_service: ApiEventService,
        hip_environments: HipEnvironments,
        clock=utc_now,
    ) -> None:
        self.apim = apim
        self.integration_catalogue = integration_catalogue
        self.autopublish = autopublish
        self.teams_service = teams_service
        self.email = email
        self.event_service = event_service
        self.hip_environments = hip_environments
        self.clock = clock

    async def validate_oas(self, oas: str) -> SuccessfulValidateResponse | InvalidOasResponse:
        return await self.apim.validate_in_primary(oas)

    async def create_api(self, request: DeploymentsRequest) -> SuccessfulDeploymentsResponse | InvalidOasResponse:
        """
        Deploy a new API and link it to the requesting team.

        Returns:
            SuccessfulDeploymentsResponse, or InvalidOasResponse when APIM rejects the OAS

        Raises:
            ApimException: If the deployment call fails
            IntegrationCatalogueException: If the team link cannot be recorded
        """
        response = await self.apim.deploy_to_secondary(request)
        if isinstance(response, SuccessfulDeploymentsResponse):
            await self.integration_catalogue.link_api_to_team(
                ApiTeam(publisher_reference=response.id, team_id=request.team_id)
            )
            logger.info("API deployed", extra={"publisher_reference": response.id, "team_id": request.team_id})
        return response

    async def update_api(
        self,
        publisher_reference: str,
        request: RedeploymentRequest,
        user_email: str,
    ) -> SuccessfulDeploymentsResponse | InvalidOasResponse:
        """
        Redeploy an existing API to the deployment environment.

        Raises:
            ApiNotFoundException: If the catalogue has no API with this publisher reference
            ApimException: If the redeployment call fails
        """
        api = await self.integration_catalogue.find_by_publisher_ref(publisher_reference)
        response = await self.apim.update_api(publisher_reference, request)
        if isinstance(response, SuccessfulDeploymentsResponse):
            logger.info("API redeployed", extra={"publisher_reference": publisher_reference})
            await self.event_service.update(
                api.id,
                self.hip_environments.deploy_to,
                api.version,
                request,
                response,
                user_email,
                self.clock(),
            )
        return response

    async def get_deployments(self, publisher_reference: str) -> list[DeploymentStatus]:
        """Deployment status in every environment. A failed lookup reports UNKNOWN."""
        results = await asyncio.gather(
            *(self.apim.get_deployment(publisher_reference, environment) for environment in self.hip_environments.environments),
            return_exceptions=True,
        )
        return [
            self._status(publisher_reference, environment, result)
            for environment, result in zip(self.hip_environments.environments, results)
        ]

    @staticmethod
    def _status(
        publisher_reference: str,
        environment: HipEnvironment,
        result: SuccessfulDeploymentResponse | BaseException | None,
    ) -> DeploymentStatus:
        if isinstance(result, ApimException):
            logger.warning(
                "Unable to read deployment status",
                extra={"publisher_reference": publisher_reference, "environment_id": environment.id, "error": str(result)},
            )
            return DeploymentStatus(environment_id=environment.id, status=DeploymentState.UNKNOWN)
        if isinstance(result, BaseException):
            raise result
        if result is None:
            return DeploymentStatus(environment_id=environment.id, status=DeploymentState.NOT_DEPLOYED)
        return DeploymentStatus(
            environment_id=environment.id,
            status=DeploymentState.DEPLOYED,
            version=result.oas_version,
        )

    async def get_deployment(
        self,
        publisher_reference: str,
        environment: HipEnvironment,
    ) -> SuccessfulDeploymentResponse | None:
        return await self.apim.get_deployment(publisher_reference, environment)

    async def list_deployments(self, environment: HipEnvironment) -> list[SuccessfulDeploymentResponse]:
        return await self.apim.get_deployments(environment)

    async def get_deployment_details(self, publisher_reference: str) -> DeploymentDetails:
        return await self.apim.get_deployment_details(publisher_reference)

    async def get_open_api_specification(self, publisher_reference: str, environment: HipEnvironment) -> str:
        return await self.apim.get_open_api_specification(publisher_reference, environment)

    async def promote_api(
        self,
        publisher_reference: str,
        environment_from: HipEnvironment,
        environment_to: HipEnvironment,
        egress: str,
        user_email: str,
    ) -> SuccessfulDeploymentsResponse | InvalidOasResponse:
        """
        Promote an API from one environment to another.

        The event records the OAS version deployed in the source environment
        at the time of promotion.

        Raises:
            ApiNotFoundException: If the catalogue has no API with this publisher reference
            ApimException: If the promotion call fails
        """
        api = await self.integration_catalogue.find_by_publisher_ref(publisher_reference)

        try:
            deployment = await self.apim.get_deployment(publisher_reference, environment_from)
            oas_version = deployment.oas_version if deployment else NOT_DEPLOYED_VERSION
        except ApimException as e:
            logger.warning(
                "Unable to read source deployment",
                extra={"publisher_reference": publisher_reference, "environment_id": environment_from.id, "error": str(e)},
            )
            oas_version = UNKNOWN_VERSION

        response = await self.apim.promote_api(publisher_reference, environment_from, environment_to, egress)
        if isinstance(response, SuccessfulDeploymentsResponse):
            logger.info(
                "API promoted",
                extra={
                    "publisher_reference": publisher_reference,
                    "from_environment": environment_from.id,
                    "to_environment": environment_to.id,
                },
            )
            await self.event_service.promote(
                api.id,
                environment_from,
                environment_to,
                oas_version,
                egress,
                response,
                user_email,
                self.clock(),
            )
        return response

    async def update_api_team(self, api_id: str, team_id: str, user_email: str) -> None:
        """
        Change the team that owns an API.

        Raises:
            ApiNotFoundException: If the catalogue has no API with this id
            TeamNotFoundException: If either team does not exist
        """
        api = await self.integration_catalogue.find_by_id(api_id)
        new_team = await self.teams_service.find_by_id(team_id)
        old_team = await self.teams_service.find_by_id(api.team_id) if api.team_id else None

        await self.integration_catalogue.update_api_team(api_id, team_id)
        logger.info("API owning team changed", extra={"api_id": api_id, "team_id": team_id})
        await self.event_service.change_team(api_id, new_team, old_team, user_email, self.clock())

        if old_team is not None:
            await notify(
                self.email.send_api_ownership_changed_email_to_old_team_members(old_team, new_team, api),
                "API ownership changed",
            )
        await notify(
            self.email.send_api_ownership_changed_email_to_new_team_members(new_team, api),
            "API ownership changed",
        )

    async def remove_owning_team_from_api(self, api_id: str) -> None:
        await self.integration_catalogue.find_by_id(api_id)
        await self.integration_catalogue.remove_api_team(api_id)
        logger.info("API owning team removed", extra={"api_id": api_id})

    async def force_publish(self, publisher_reference: str) -> None:
        await self.autopublish.force_publish(publisher_reference)

    async def list_egress_gateways(self, environment: HipEnvironment) -> list[EgressGateway]:
        return await self.apim.list_egress_gateways(environment)
