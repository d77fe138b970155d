"""
API Management Platform connector.

Validates and deploys OpenAPI specifications through the simple API
deployment endpoints, and reads deployments, details and egress gateways
per HIP environment.

Dependencies: httpx, pydantic
System role: APIM deployment integration
"""

import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from api_hub_applications.boundary.connectors.base_connector import BaseConnector, is_success
from api_hub_applications.configs.hip_environments import HipEnvironment, HipEnvironments
from api_hub_applications.core.exceptions import ApimException
from api_hub_applications.models.apim import (
    DeploymentDetails,
    DeploymentsRequest,
    DetailsResponse,
    EgressGateway,
    FailuresResponse,
    InvalidOasResponse,
    RedeploymentRequest,
    SuccessfulDeploymentResponse,
    SuccessfulDeploymentsResponse,
    SuccessfulValidateResponse,
    ValidationFailure,
)

logger = logging.getLogger(__name__)

DEPLOYMENT_PATH = "/v1/simple-api-deployment"
OAS_DEPLOYMENTS_PATH = "/v1/oas-deployments"


class ApimConnector(BaseConnector):
    """Simple API deployment operations against the configured HIP environments."""

    service_name = "APIM"

    def __init__(self, client: httpx.AsyncClient, hip_environments: HipEnvironments) -> None:
        super().__init__(client)
        self.hip_environments = hip_environments

    @staticmethod
    def _url(environment: HipEnvironment, path: str) -> str:
        return f"{environment.apim_url.rstrip('/')}{path}"

    def _fail(self, status_code: int, environment: HipEnvironment, **context: Any) -> ApimException:
        pairs = [("environment", environment.id), *context.items()]
        error = ApimException.unexpected_response(status_code, self.context(*pairs))
        logger.warning(error.message, extra={"environment_id": environment.id, "status_code": status_code})
        return error

    def _call_error(self, environment: HipEnvironment):
        return lambda e: ApimException.error(e, self.context(("environment", environment.id)))

    @staticmethod
    def _parse(model, response: httpx.Response):
        try:
            return model.model_validate(response.json())
        except (ValidationError, ValueError) as e:
            raise ApimException.invalid_response(str(e)) from e

    @staticmethod
    def _invalid_oas(response: httpx.Response) -> InvalidOasResponse | None:
        """Read validation failures from a 400 body, or None when it has none."""
        if not response.content:
            return None
        try:
            body = response.json()
            if isinstance(body, list):
                failures = [ValidationFailure.model_validate(failure) for failure in body]
                return InvalidOasResponse(
                    failure=FailuresResponse(code="BAD_REQUEST", reason="Validation failed", errors=failures)
                )
            return InvalidOasResponse.model_validate(body)
        except (ValidationError, ValueError):
            logger.warning(
                "Unknown response body from Simple OAS Deployment service",
                extra={"body": response.text},
            )
            return None

    async def validate_in_primary(self, oas: str) -> SuccessfulValidateResponse | InvalidOasResponse:
        """
        Validate an OpenAPI specification in the validation environment.

        Returns:
            SuccessfulValidateResponse on 2xx, InvalidOasResponse on a 400 with failures

        Raises:
            ApimException: For any other response
        """
        environment = self.hip_environments.validate_in
        headers = self.environment_headers(environment)
        headers["Content-Type"] = "application/yaml"
        response = await self.send(
            "POST",
            self._url(environment, f"{DEPLOYMENT_PATH}/validate"),
            self._call_error(environment),
            headers=headers,
            content=oas.encode("utf-8"),
        )
        if is_success(response):
            return SuccessfulValidateResponse()
        if response.status_code == 400:
            invalid = self._invalid_oas(response)
            if invalid is not None:
                return invalid
        raise self._fail(response.status_code, environment)

    async def deploy_to_secondary(
        self,
        request: DeploymentsRequest,
    ) -> SuccessfulDeploymentsResponse | InvalidOasResponse:
        """
        Deploy a new API to the deployment environment.

        The request is multipart: a JSON metadata part and the OpenAPI part.
        """
        environment = self.hip_environments.deploy_to
        response = await self.send(
            "POST",
            self._url(environment, f"{DEPLOYMENT_PATH}/deployments"),
            self._call_error(environment),
            headers=self.environment_headers(environment),
            files={
                "metadata": (None, json.dumps(request.to_metadata()), "application/json"),
                "openapi": (None, request.oas, "application/yaml"),
            },
        )
        if is_success(response):
            return self._parse(SuccessfulDeploymentsResponse, response)
        if response.status_code == 400:
            invalid = self._invalid_oas(response)
            if invalid is not None:
                return invalid
        raise self._fail(response.status_code, environment)

    async def update_api(
        self,
        publisher_reference: str,
        request: RedeploymentRequest,
    ) -> SuccessfulDeploymentsResponse | InvalidOasResponse:
        """Redeploy an existing API to the deployment environment."""
        environment = self.hip_environments.deploy_to
        response = await self.send(
            "PUT",
            self._url(environment, f"{DEPLOYMENT_PATH}/deployments/{publisher_reference}"),
            self._call_error(environment),
            headers=self.environment_headers(environment),
            files={
                "metadata": (None, json.dumps(request.to_metadata()), "application/json"),
                "openapi": (None, request.oas, "application/yaml"),
            },
        )
        if is_success(response):
            return self._parse(SuccessfulDeploymentsResponse, response)
        if response.status_code == 400:
            invalid = self._invalid_oas(response)
            if invalid is not None:
                return invalid
        if response.status_code == 404:
            raise ApimException.service_not_found(publisher_reference)
        raise self._fail(response.status_code, environment, publisherReference=publisher_reference)

    async def get_deployment(
        self,
        publisher_reference: str,
        environment: HipEnvironment,
    ) -> SuccessfulDeploymentResponse | None:
        """Deployment of one API in an environment, or None when it is not deployed there."""
        response = await self.send(
            "GET",
            self._url(environment, f"{OAS_DEPLOYMENTS_PATH}/{publisher_reference}"),
            self._call_error(environment),
            headers=self.environment_headers(environment),
        )
        if is_success(response):
            return self._parse(SuccessfulDeploymentResponse, response)
        if response.status_code == 404:
            return None
        raise self._fail(response.status_code, environment, publisherReference=publisher_reference)

    async def get_deployments(self, environment: HipEnvironment) -> list[SuccessfulDeploymentResponse]:
        response = await self.send(
            "GET",
            self._url(environment, OAS_DEPLOYMENTS_PATH),
            self._call_error(environment),
            headers=self.environment_headers(environment),
        )
        if not is_success(response):
            raise self._fail(response.status_code, environment)
        try:
            return [SuccessfulDeploymentResponse.model_validate(item) for item in response.json()]
        except (ValidationError, ValueError) as e:
            raise ApimException.invalid_response(str(e)) from e

    async def get_deployment_details(self, publisher_reference: str) -> DeploymentDetails:
        """
        Deployment metadata held by the deployment environment.

        Raises:
            ApimException: SERVICE_NOT_FOUND on 404
        """
        environment = self.hip_environments.deploy_to
        response = await self.send(
            "GET",
            self._url(environment, f"{DEPLOYMENT_PATH}/deployments/{publisher_reference}"),
            self._call_error(environment),
            headers=self.environment_headers(environment),
        )
        if is_success(response):
            return self._parse(DetailsResponse, response).to_deployment_details()
        if response.status_code == 404:
            raise ApimException.service_not_found(publisher_reference)
        raise self._fail(response.status_code, environment, publisherReference=publisher_reference)

    async def promote_api(
        self,
        publisher_reference: str,
        environment_from: HipEnvironment,
        environment_to: HipEnvironment,
        egress: str,
    ) -> SuccessfulDeploymentsResponse | InvalidOasResponse:
        """Promote the API deployed in environment_from into environment_to."""
        response = await self.send(
            "PUT",
            self._url(environment_to, f"{DEPLOYMENT_PATH}/deployment-from"),
            self._call_error(environment_to),
            headers=self.environment_headers(environment_to),
            json={
                "env": environment_from.apim_environment_name,
                "serviceId": publisher_reference,
                "egress": egress,
            },
        )
        if is_success(response):
            return self._parse(SuccessfulDeploymentsResponse, response)
        if response.status_code == 400:
            invalid = self._invalid_oas(response)
            if invalid is not None:
                return invalid
        if response.status_code == 404:
            raise ApimException.service_not_found(publisher_reference)
        raise self._fail(response.status_code, environment_to, publisherReference=publisher_reference)

    async def list_egress_gateways(self, environment: HipEnvironment) -> list[EgressGateway]:
        response = await self.send(
            "GET",
            self._url(environment, f"{DEPLOYMENT_PATH}/egress-gateways"),
            self._call_error(environment),
            headers=self.environment_headers(environment),
        )
        if not is_success(response):
            raise self._fail(response.status_code, environment)
        try:
            return [EgressGateway.model_validate(item) for item in response.json()]
        except (ValidationError, ValueError) as e:
            raise ApimException.invalid_response(str(e)) from e

    async def get_open_api_specification(self, publisher_reference: str, environment: HipEnvironment) -> str:
        headers = self.environment_headers(environment)
        headers["Accept"] = "application/yaml"
        response = await self.send(
            "GET",
            self._url(environment, f"{OAS_DEPLOYMENTS_PATH}/{publisher_reference}/oas"),
            self._call_error(environment),
            headers=headers,
        )
        if is_success(response):
            return response.text
        if response.status_code == 404:
            raise ApimException.service_not_found(publisher_reference)
        raise self._fail(response.status_code, environment, publisherReference=publisher_reference)
