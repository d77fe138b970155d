"""
Autopublish connector.

Asks the integration catalogue autopublish service to republish an API.

Dependencies: httpx
System role: Catalogue republish trigger
"""

import logging

import httpx

from api_hub_applications.boundary.connectors.base_connector import BaseConnector, is_success
from api_hub_applications.core.exceptions import AutopublishException

logger = logging.getLogger(__name__)


class AutopublishConnector(BaseConnector):
    service_name = "auto-publish"

    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        super().__init__(client)
        self.base_url = f"{base_url.rstrip('/')}/integration-catalogue-autopublish"

    async def force_publish(self, publisher_reference: str) -> None:
        """
        Republish an API from its current deployment.

        Raises:
            AutopublishException: DEPLOYMENT_NOT_FOUND on 404, otherwise UNEXPECTED_RESPONSE or CALL_ERROR
        """
        response = await self.send(
            "PUT",
            f"{self.base_url}/apis/{publisher_reference}/publish",
            AutopublishException.error,
        )
        if is_success(response):
            return
        if response.status_code == 404:
            raise AutopublishException.deployment_not_found(publisher_reference)
        logger.warning(
            "Unexpected response from auto-publish",
            extra={"publisher_reference": publisher_reference, "status_code": response.status_code},
        )
        raise AutopublishException.unexpected_response(response.status_code)
