"""
Integration catalogue connector.

Reads API details and maintains API ownership in the integration
catalogue. Every call carries the service's app auth token.

Dependencies: httpx, pydantic
System role: API catalogue integration
"""

import logging

import httpx
from pydantic import ValidationError

from api_hub_applications.boundary.connectors.base_connector import BaseConnector, is_success
from api_hub_applications.core.exceptions import ApiNotFoundException, IntegrationCatalogueException
from api_hub_applications.models.integration_catalogue import HIP_PLATFORM, ApiDetail, ApiTeam

logger = logging.getLogger(__name__)


class IntegrationCatalogueConnector(BaseConnector):
    """Integration catalogue API lookups and team links."""

    service_name = "Integration Catalogue"

    def __init__(self, client: httpx.AsyncClient, base_url: str, app_auth_token: str) -> None:
        super().__init__(client)
        self.base_url = f"{base_url.rstrip('/')}/integration-catalogue"
        self.app_auth_token = app_auth_token

    def default_headers(self) -> dict[str, str]:
        headers = super().default_headers()
        headers["Authorization"] = self.app_auth_token
        return headers

    def _call_error(self, **context: str):
        return lambda e: IntegrationCatalogueException.error(e, self.context(*context.items()))

    def _fail(self, status_code: int, **context: str) -> IntegrationCatalogueException:
        error = IntegrationCatalogueException.unexpected_response(status_code, self.context(*context.items()))
        logger.warning(error.message, extra={"status_code": status_code})
        return error

    @staticmethod
    def _api_detail(response: httpx.Response) -> ApiDetail:
        try:
            return ApiDetail.model_validate(response.json())
        except (ValidationError, ValueError) as e:
            raise IntegrationCatalogueException.error(e) from e

    async def link_api_to_team(self, api_team: ApiTeam) -> None:
        response = await self.send(
            "POST",
            f"{self.base_url}/apis/team",
            self._call_error(publisherReference=api_team.publisher_reference),
            json=api_team.to_json_dict(),
        )
        if not is_success(response):
            raise self._fail(response.status_code, publisherReference=api_team.publisher_reference)

    async def find_by_id(self, api_id: str) -> ApiDetail:
        """
        Fetch one API's details.

        Raises:
            ApiNotFoundException: On 404
            IntegrationCatalogueException: For any other failure
        """
        response = await self.send("GET", f"{self.base_url}/apis/{api_id}", self._call_error(apiId=api_id))
        if is_success(response):
            return self._api_detail(response)
        if response.status_code == 404:
            raise ApiNotFoundException.for_id(api_id)
        raise self._fail(response.status_code, apiId=api_id)

    async def find_by_publisher_ref(self, publisher_reference: str) -> ApiDetail:
        response = await self.send(
            "GET",
            f"{self.base_url}/apis/publisher-reference/{publisher_reference}",
            self._call_error(publisherReference=publisher_reference),
        )
        if is_success(response):
            return self._api_detail(response)
        if response.status_code == 404:
            raise ApiNotFoundException.for_publisher_ref(publisher_reference)
        raise self._fail(response.status_code, publisherReference=publisher_reference)

    async def update_api_team(self, api_id: str, team_id: str) -> None:
        response = await self.send(
            "PUT",
            f"{self.base_url}/apis/{api_id}/teams/{team_id}",
            self._call_error(apiId=api_id, teamId=team_id),
        )
        if is_success(response):
            return
        if response.status_code == 404:
            raise ApiNotFoundException.for_id(api_id)
        raise self._fail(response.status_code, apiId=api_id, teamId=team_id)

    async def remove_api_team(self, api_id: str) -> None:
        response = await self.send("DELETE", f"{self.base_url}/apis/{api_id}/teams", self._call_error(apiId=api_id))
        if is_success(response):
            return
        if response.status_code == 404:
            raise ApiNotFoundException.for_id(api_id)
        raise self._fail(response.status_code, apiId=api_id)

    async def find_apis(self, platform_filter: str | None = None) -> list[ApiDetail]:
        params = {"platformFilter": platform_filter} if platform_filter else None
        response = await self.send(
            "GET",
            f"{self.base_url}/filtered-apis",
            self._call_error(platformFilter=platform_filter or ""),
            params=params,
        )
        if not is_success(response):
            raise self._fail(response.status_code, platformFilter=platform_filter or "")
        try:
            return [ApiDetail.model_validate(item) for item in response.json()]
        except (ValidationError, ValueError) as e:
            raise IntegrationCatalogueException.error(e) from e

    async def find_hip_apis(self) -> list[ApiDetail]:
        return await self.find_apis(HIP_PLATFORM)
