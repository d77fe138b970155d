"""
Test suite for the deployments router.

Tests APIM outcome mapping (accepted vs invalid OAS), environment
resolution and the API ownership endpoints.

System role: API producer HTTP API verification
"""

from unittest.mock import AsyncMock

import pytest

from api_hub_applications.api.deps.dependencies import SYSTEM_USER, get_deployments_service
from api_hub_applications.core.exceptions import (
    ApiNotFoundException,
    ApimException,
    AutopublishException,
)
from api_hub_applications.models.apim import (
    DeploymentDetails,
    DeploymentState,
    DeploymentStatus,
    EgressGateway,
    FailuresResponse,
    InvalidOasResponse,
    SuccessfulDeploymentResponse,
    SuccessfulDeploymentsResponse,
    SuccessfulValidateResponse,
    ValidationFailure,
)

OAS = "openapi: 3.0.3\ninfo:\n  title: Test API\n  version: 1.0.0\n"


@pytest.fixture
def mock_deployments_service():
    return AsyncMock()


@pytest.fixture
def deployments_client(client, mock_deployments_service):
    client.app.dependency_overrides[get_deployments_service] = lambda: mock_deployments_service
    return client


@pytest.fixture
def deployed() -> SuccessfulDeploymentsResponse:
    return SuccessfulDeploymentsResponse(id="ref-1", version="1", merge_request_iid=42, uri="https://gitlab.example/mr/42")


@pytest.fixture
def invalid_oas() -> InvalidOasResponse:
    return InvalidOasResponse(
        failure=FailuresResponse(
            code="BAD_REQUEST",
            reason="Validation failed",
            errors=[ValidationFailure(type="ERROR", message="info.title is required")],
        )
    )


def deployments_body(**overrides) -> dict:
    body = {
        "lineOfBusiness": "apim",
        "name": "test-api",
        "description": "A test API",
        "teamId": "65f2c0ffee0000000000aaaa",
        "oas": OAS,
        "status": "ALPHA",
        "domain": "8",
        "subDomain": "8.1",
        "hods": ["EMA"],
    }
    body.update(overrides)
    return body


class TestCreateDeployment:
    def test_accepted(self, deployments_client, mock_deployments_service, deployed):
        # Arrange
        mock_deployments_service.create_api.return_value = deployed

        # Act
        response = deployments_client.post("/api/v1/deployments", json=deployments_body())

        # Assert
        assert response.status_code == 200
        assert response.json() == {
            "id": "ref-1",
            "version": "1",
            "mergeRequestIid": 42,
            "uri": "https://gitlab.example/mr/42",
        }
        request = mock_deployments_service.create_api.call_args.args[0]
        assert request.team_id == "65f2c0ffee0000000000aaaa"
        assert request.sub_domain == "8.1"

    def test_invalid_oas_is_a_bad_request(self, deployments_client, mock_deployments_service, invalid_oas):
        mock_deployments_service.create_api.return_value = invalid_oas

        response = deployments_client.post("/api/v1/deployments", json=deployments_body())

        assert response.status_code == 400
        assert response.json()["failure"]["errors"][0]["message"] == "info.title is required"

    def test_blank_oas_is_rejected(self, deployments_client, mock_deployments_service):
        response = deployments_client.post("/api/v1/deployments", json=deployments_body(oas=" "))

        assert response.status_code == 400
        mock_deployments_service.create_api.assert_not_called()

    def test_apim_failure_is_a_bad_gateway(self, deployments_client, mock_deployments_service):
        mock_deployments_service.create_api.side_effect = ApimException.unexpected_response(500)

        response = deployments_client.post("/api/v1/deployments", json=deployments_body())

        assert response.status_code == 502


class TestUpdateDeployment:
    def test_redeploy(self, deployments_client, mock_deployments_service, deployed):
        mock_deployments_service.update_api.return_value = deployed

        response = deployments_client.put(
            "/api/v1/deployments/ref-1",
            params={"userEmail": "producer@example.com"},
            json={"description": "Updated", "oas": OAS, "status": "BETA", "domain": "8", "subDomain": "8.1"},
        )

        assert response.status_code == 200
        publisher_reference, request, user_email = mock_deployments_service.update_api.call_args.args
        assert publisher_reference == "ref-1"
        assert request.status == "BETA"
        assert user_email == "producer@example.com"

    def test_unknown_api(self, deployments_client, mock_deployments_service):
        mock_deployments_service.update_api.side_effect = ApiNotFoundException.for_publisher_ref("ref-1")

        response = deployments_client.put(
            "/api/v1/deployments/ref-1",
            json={"description": "Updated", "oas": OAS, "status": "BETA", "domain": "8", "subDomain": "8.1"},
        )

        assert response.status_code == 404


class TestDeploymentStatus:
    def test_status_in_every_environment(self, deployments_client, mock_deployments_service):
        mock_deployments_service.get_deployments.return_value = [
            DeploymentStatus(environment_id="production", status=DeploymentState.NOT_DEPLOYED),
            DeploymentStatus(environment_id="test", status=DeploymentState.DEPLOYED, version="1.0.0"),
        ]

        response = deployments_client.get("/api/v1/deployments/ref-1")

        assert response.status_code == 200
        assert response.json() == [
            {"environmentId": "production", "status": "NOT_DEPLOYED"},
            {"environmentId": "test", "status": "DEPLOYED", "version": "1.0.0"},
        ]

    def test_details(self, deployments_client, mock_deployments_service):
        mock_deployments_service.get_deployment_details.return_value = DeploymentDetails(
            description="A test API", status="ALPHA", domain="8", sub_domain="8.1", hods=["EMA"]
        )

        response = deployments_client.get("/api/v1/deployments/ref-1/details")

        assert response.status_code == 200
        assert response.json()["subDomain"] == "8.1"

    def test_details_for_unknown_service(self, deployments_client, mock_deployments_service):
        mock_deployments_service.get_deployment_details.side_effect = ApimException.service_not_found("ref-1")

        response = deployments_client.get("/api/v1/deployments/ref-1/details")

        assert response.status_code == 404


class TestPromotion:
    def test_promote_resolves_environments(
        self, deployments_client, mock_deployments_service, deployed, test_environment, production
    ):
        mock_deployments_service.promote_api.return_value = deployed

        response = deployments_client.put(
            "/api/v1/deployments/ref-1/promote",
            json={
                "environmentFrom": "test",
                "environmentTo": "production",
                "egress": "egress-1",
                "userEmail": "producer@example.com",
            },
        )

        assert response.status_code == 200
        mock_deployments_service.promote_api.assert_awaited_once_with(
            "ref-1", test_environment, production, "egress-1", "producer@example.com"
        )

    def test_promote_to_same_environment_is_rejected(self, deployments_client, mock_deployments_service):
        response = deployments_client.put(
            "/api/v1/deployments/ref-1/promote",
            json={
                "environmentFrom": "test",
                "environmentTo": "test",
                "egress": "egress-1",
                "userEmail": "producer@example.com",
            },
        )

        assert response.status_code == 400
        mock_deployments_service.promote_api.assert_not_called()

    def test_promote_from_unknown_environment(self, deployments_client, mock_deployments_service):
        response = deployments_client.put(
            "/api/v1/deployments/ref-1/promote",
            json={
                "environmentFrom": "nowhere",
                "environmentTo": "production",
                "egress": "egress-1",
                "userEmail": "producer@example.com",
            },
        )

        assert response.status_code == 404
        mock_deployments_service.promote_api.assert_not_called()


class TestApiTeams:
    def test_update_api_team(self, deployments_client, mock_deployments_service):
        response = deployments_client.put("/api/v1/apis/api-1/teams/team-2")

        assert response.status_code == 204
        mock_deployments_service.update_api_team.assert_awaited_once_with("api-1", "team-2", SYSTEM_USER)

    def test_remove_api_team(self, deployments_client, mock_deployments_service):
        response = deployments_client.delete("/api/v1/apis/api-1/teams")

        assert response.status_code == 204
        mock_deployments_service.remove_owning_team_from_api.assert_awaited_once_with("api-1")

    def test_force_publish(self, deployments_client, mock_deployments_service):
        response = deployments_client.put("/api/v1/apis/ref-1/force-publish")

        assert response.status_code == 204
        mock_deployments_service.force_publish.assert_awaited_once_with("ref-1")

    def test_force_publish_without_deployment(self, deployments_client, mock_deployments_service):
        mock_deployments_service.force_publish.side_effect = AutopublishException.deployment_not_found("ref-1")

        response = deployments_client.put("/api/v1/apis/ref-1/force-publish")

        assert response.status_code == 404

    def test_force_publish_failure(self, deployments_client, mock_deployments_service):
        mock_deployments_service.force_publish.side_effect = AutopublishException.unexpected_response(500)

        response = deployments_client.put("/api/v1/apis/ref-1/force-publish")

        assert response.status_code == 502


class TestApimPassThrough:
    def test_egress_gateways_require_environment(self, deployments_client, mock_deployments_service):
        response = deployments_client.get("/api/v1/egresses/gateways")

        assert response.status_code == 400
        mock_deployments_service.list_egress_gateways.assert_not_called()

    def test_egress_gateways(self, deployments_client, mock_deployments_service, production):
        mock_deployments_service.list_egress_gateways.return_value = [
            EgressGateway(id="egress-1", friendly_name="Egress One")
        ]

        response = deployments_client.get("/api/v1/egresses/gateways", params={"environment": "production"})

        assert response.status_code == 200
        assert response.json() == [{"id": "egress-1", "friendlyName": "Egress One"}]
        mock_deployments_service.list_egress_gateways.assert_awaited_once_with(production)

    def test_validate_oas(self, deployments_client, mock_deployments_service):
        mock_deployments_service.validate_oas.return_value = SuccessfulValidateResponse()

        response = deployments_client.post(
            "/api/v1/oas/validate",
            content=OAS,
            headers={"Content-Type": "application/yaml"},
        )

        assert response.status_code == 200
        assert response.json() == {"valid": True}
        mock_deployments_service.validate_oas.assert_awaited_once_with(OAS)

    def test_validate_invalid_oas(self, deployments_client, mock_deployments_service, invalid_oas):
        mock_deployments_service.validate_oas.return_value = invalid_oas

        response = deployments_client.post("/api/v1/oas/validate", content=OAS)

        assert response.status_code == 400
        assert response.json()["failure"]["code"] == "BAD_REQUEST"

    def test_validate_empty_body(self, deployments_client, mock_deployments_service):
        response = deployments_client.post("/api/v1/oas/validate", content="")

        assert response.status_code == 400
        mock_deployments_service.validate_oas.assert_not_called()

    def test_list_environment_deployments(self, deployments_client, mock_deployments_service, test_environment):
        mock_deployments_service.list_deployments.return_value = [
            SuccessfulDeploymentResponse(id="ref-1", oas_version="1.0.0")
        ]

        response = deployments_client.get("/api/v1/apim/test/deployments")

        assert response.status_code == 200
        assert response.json() == [{"id": "ref-1", "oasVersion": "1.0.0"}]
        mock_deployments_service.list_deployments.assert_awaited_once_with(test_environment)

    def test_single_deployment_not_deployed(self, deployments_client, mock_deployments_service):
        mock_deployments_service.get_deployment.return_value = None

        response = deployments_client.get("/api/v1/apim/test/deployments/ref-1")

        assert response.status_code == 404

    def test_single_deployment(self, deployments_client, mock_deployments_service):
        mock_deployments_service.get_deployment.return_value = SuccessfulDeploymentResponse(
            id="ref-1", oas_version="1.0.0", build_version="7"
        )

        response = deployments_client.get("/api/v1/apim/test/deployments/ref-1")

        assert response.status_code == 200
        assert response.json()["buildVersion"] == "7"

    def test_open_api_specification_is_plain_text(self, deployments_client, mock_deployments_service):
        mock_deployments_service.get_open_api_specification.return_value = OAS

        response = deployments_client.get("/api/v1/apim/production/oas/ref-1")

        assert response.status_code == 200
        assert response.text == OAS
        assert response.headers["content-type"].startswith("text/plain")

    def test_unknown_environment(self, deployments_client, mock_deployments_service):
        response = deployments_client.get("/api/v1/apim/nowhere/deployments")

        assert response.status_code == 404
        mock_deployments_service.list_deployments.assert_not_called()
