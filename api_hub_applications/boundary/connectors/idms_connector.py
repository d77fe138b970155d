"""
Identity Management Service connector.

Creates, reads and deletes OAuth clients and their scopes in a given HIP
environment. Calls go to {apimUrl}/identity/clients.

Dependencies: httpx
System role: IDMS client credential integration
"""

import logging

from api_hub_applications.boundary.connectors.base_connector import BaseConnector, is_success
from api_hub_applications.configs.hip_environments import HipEnvironment
from api_hub_applications.core.exceptions import IdmsException
from api_hub_applications.models.application import Secret
from api_hub_applications.models.idms import Client, ClientResponse, ClientScope

logger = logging.getLogger(__name__)


class IdmsConnector(BaseConnector):
    """IDMS client operations, one environment per call."""

    service_name = "IDMS"

    @staticmethod
    def _clients_url(environment: HipEnvironment) -> str:
        return f"{environment.apim_url.rstrip('/')}/identity/clients"

    def _fail(self, environment: HipEnvironment, status_code: int, client_id: str | None = None) -> IdmsException:
        pairs = [("environmentName", environment.id)]
        if client_id:
            pairs.append(("clientId", client_id))
        error = IdmsException.unexpected_response(status_code, self.context(*pairs))
        logger.warning(error.message, extra={"environment_id": environment.id, "status_code": status_code})
        return error

    def _call_error(self, environment: HipEnvironment, client_id: str | None = None):
        def build(e: Exception) -> IdmsException:
            pairs = [("environmentName", environment.id)]
            if client_id:
                pairs.append(("clientId", client_id))
            return IdmsException.error(e, self.context(*pairs))

        return build

    async def create_client(self, environment: HipEnvironment, client: Client) -> ClientResponse:
        """
        Create a new IDMS client.

        Returns:
            ClientResponse: The new client id and its secret

        Raises:
            IdmsException: On any non-2xx response or transport failure
        """
        response = await self.send(
            "POST",
            self._clients_url(environment),
            self._call_error(environment),
            headers=self.environment_headers(environment),
            json=client.to_json_dict(),
        )
        if is_success(response):
            return ClientResponse.model_validate(response.json())
        raise self._fail(environment, response.status_code)

    async def fetch_client(self, environment: HipEnvironment, client_id: str) -> ClientResponse:
        """
        Fetch a client's current secret.

        Raises:
            IdmsException: CLIENT_NOT_FOUND on 404, otherwise UNEXPECTED_RESPONSE or CALL_ERROR
        """
        response = await self.send(
            "GET",
            f"{self._clients_url(environment)}/{client_id}/client-secret",
            self._call_error(environment, client_id),
            headers=self.environment_headers(environment),
        )
        if is_success(response):
            secret = Secret.model_validate(response.json())
            return ClientResponse(client_id=client_id, secret=secret.secret)
        if response.status_code == 404:
            raise IdmsException.client_not_found(client_id)
        raise self._fail(environment, response.status_code, client_id)

    async def delete_client(self, environment: HipEnvironment, client_id: str) -> None:
        response = await self.send(
            "DELETE",
            f"{self._clients_url(environment)}/{client_id}",
            self._call_error(environment, client_id),
            headers=self.environment_headers(environment),
        )
        if is_success(response):
            return
        if response.status_code == 404:
            raise IdmsException.client_not_found(client_id)
        raise self._fail(environment, response.status_code, client_id)

    async def new_secret(self, environment: HipEnvironment, client_id: str) -> Secret:
        """Generate a new secret for an existing client."""
        response = await self.send(
            "POST",
            f"{self._clients_url(environment)}/{client_id}/client-secret",
            self._call_error(environment, client_id),
            headers=self.environment_headers(environment),
        )
        if is_success(response):
            return Secret.model_validate(response.json())
        if response.status_code == 404:
            raise IdmsException.client_not_found(client_id)
        raise self._fail(environment, response.status_code, client_id)

    async def add_client_scope(self, environment: HipEnvironment, client_id: str, scope_id: str) -> None:
        response = await self.send(
            "PUT",
            f"{self._clients_url(environment)}/{client_id}/client-scopes/{scope_id}",
            self._call_error(environment, client_id),
            headers=self.environment_headers(environment),
        )
        if is_success(response):
            return
        if response.status_code == 404:
            raise IdmsException.client_not_found(client_id)
        raise self._fail(environment, response.status_code, client_id)

    async def delete_client_scope(self, environment: HipEnvironment, client_id: str, scope_id: str) -> None:
        response = await self.send(
            "DELETE",
            f"{self._clients_url(environment)}/{client_id}/client-scopes/{scope_id}",
            self._call_error(environment, client_id),
            headers=self.environment_headers(environment),
        )
        if is_success(response):
            return
        if response.status_code == 404:
            raise IdmsException.client_not_found(client_id)
        raise self._fail(environment, response.status_code, client_id)

    async def fetch_client_scopes(self, environment: HipEnvironment, client_id: str) -> list[ClientScope]:
        response = await self.send(
            "GET",
            f"{self._clients_url(environment)}/{client_id}/client-scopes",
            self._call_error(environment, client_id),
            headers=self.environment_headers(environment),
        )
        if is_success(response):
            return [ClientScope.model_validate(scope) for scope in response.json()]
        if response.status_code == 404:
            raise IdmsException.client_not_found(client_id)
        raise self._fail(environment, response.status_code, client_id)
