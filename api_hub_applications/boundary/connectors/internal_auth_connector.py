"""
Internal auth connector.

Checks a caller's token against the internal-auth service.

Dependencies: httpx
System role: Inbound request authorisation
"""

import logging

import httpx

from api_hub_applications.boundary.connectors.base_connector import BaseConnector
from api_hub_applications.core.exceptions import ApplicationsException

logger = logging.getLogger(__name__)

RESOURCE = {"resourceType": "api-hub-applications", "resourceLocation": "*"}


class InternalAuthException(ApplicationsException):
    """Raised when the internal-auth service cannot answer."""


class InternalAuthConnector(BaseConnector):
    service_name = "internal-auth"

    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        super().__init__(client)
        self.url = f"{base_url.rstrip('/')}/internal-auth/auth"

    async def authorise(self, token: str) -> bool:
        """
        Whether the token grants access to this service.

        Raises:
            InternalAuthException: On transport failure or an unexpected status
        """
        headers = self.default_headers()
        headers["Authorization"] = token
        response = await self.send(
            "POST",
            self.url,
            lambda e: InternalAuthException("Error calling internal-auth", {"cause": str(e)}),
            headers=headers,
            json={"resource": RESOURCE, "action": "WRITE"},
        )
        if response.status_code == 200:
            return True
        if response.status_code in (401, 403):
            logger.info("Token not authorised", extra={"status_code": response.status_code})
            return False
        raise InternalAuthException(
            f"Unexpected response {response.status_code} returned from internal-auth",
            {"status_code": response.status_code},
        )
