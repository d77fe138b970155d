"""
Statistics service.

Counts the HIP APIs in the catalogue and how many of them are deployed to
the production environment.

Dependencies: api_hub_applications.boundary.connectors
System role: Reporting
"""

import asyncio

from api_hub_applications.boundary.connectors.apim_connector import ApimConnector
from api_hub_applications.boundary.connectors.integration_catalogue_connector import IntegrationCatalogueConnector
from api_hub_applications.configs.hip_environments import HipEnvironments
from api_hub_applications.models.integration_catalogue import ApiDetail
from api_hub_applications.models.stats import ApisInProductionStatistic


class StatsService:
    def __init__(
        self,
        apim: ApimConnector,
        integration_catalogue: IntegrationCatalogueConnector,
        hip_environments: HipEnvironments,
    ) -> None:
        self.apim = apim
        self.integration_catalogue = integration_catalogue
        self.hip_environments = hip_environments

    async def _hip_apis_and_production_ids(self) -> tuple[list[ApiDetail], set[str]]:
        apis, deployments = await asyncio.gather(
            self.integration_catalogue.find_hip_apis(),
            self.apim.get_deployments(self.hip_environments.production),
        )
        return apis, {deployment.id for deployment in deployments}

    async def apis_in_production(self) -> ApisInProductionStatistic:
        apis, production_ids = await self._hip_apis_and_production_ids()
        in_production = {api.publisher_reference for api in apis} & production_ids
        return ApisInProductionStatistic(total_apis=len(apis), apis_in_production=len(in_production))

    async def list_apis_in_production(self) -> list[ApiDetail]:
        apis, production_ids = await self._hip_apis_and_production_ids()
        return [api for api in apis if api.publisher_reference in production_ids]
