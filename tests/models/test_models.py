"""
Test suite for wire models.

System role: Verification of JSON shape and derived values
"""

from api_hub_applications.models.access_request import AccessRequest, AccessRequestRequest, AccessRequestApi
from api_hub_applications.models.application import Api, Application, Endpoint
from api_hub_applications.models.event import EntityType
from api_hub_applications.models.idms import ClientResponse
from api_hub_applications.models.integration_catalogue import ApiDetail, ApiEndpoint, EndpointMethod


class TestCamelModel:
    """Test suite for JSON serialisation."""

    def test_to_json_dict_should_use_camel_case_without_nulls(self, application: Application) -> None:
        data = application.to_json_dict()

        assert data["createdBy"] == {"email": "creator@example.com"}
        assert "lastUpdated" in data
        assert "teamId" not in data
        assert "deleted" not in data
        assert data["credentials"][0] == {
            "clientId": "production-client",
            "created": "2025-03-04T09:26:53Z",
            "environmentId": "production",
        }

    def test_should_accept_camel_case_input(self) -> None:
        request = AccessRequestRequest.model_validate(
            {
                "applicationId": "app-1",
                "supportingInformation": "Because",
                "requestedBy": "requester@example.com",
                "apis": [{"apiId": "api-1", "apiName": "API", "endpoints": []}],
            }
        )

        assert request.environment_id == "production"
        assert request.apis == [AccessRequestApi(api_id="api-1", api_name="API")]


class TestAccessRequest:
    """Test suite for access request scopes."""

    def test_scopes_should_be_distinct_in_first_seen_order(self, access_request: AccessRequest) -> None:
        assert access_request.scopes == ["read:things", "write:things"]

    def test_to_access_requests_should_create_one_pending_request_per_api(self, now) -> None:
        request = AccessRequestRequest(
            application_id="app-1",
            supporting_information="Because",
            requested_by="requester@example.com",
            apis=[AccessRequestApi(api_id="api-1", api_name="One"), AccessRequestApi(api_id="api-2", api_name="Two")],
            environment_id="test",
        )

        access_requests = request.to_access_requests(now)

        assert [access_request.api_id for access_request in access_requests] == ["api-1", "api-2"]
        assert {access_request.status.value for access_request in access_requests} == {"PENDING"}
        assert {access_request.environment_id for access_request in access_requests} == {"test"}


class TestClientResponse:
    """Test suite for new credentials."""

    def test_visible_credential_should_keep_secret_and_fragment(self, now) -> None:
        credential = ClientResponse(client_id="c1", secret="abcdefgh").as_new_credential(now, "test")

        assert credential.client_secret == "abcdefgh"
        assert credential.secret_fragment == "efgh"

    def test_hidden_credential_should_keep_no_trace_of_secret(self, now) -> None:
        credential = ClientResponse(client_id="c1", secret="abcdefgh").as_new_credential(now, "production", hidden=True)

        assert credential.client_secret is None
        assert credential.secret_fragment is None


CATALOGUE_API = ApiDetail(
    id="api-1",
    publisher_reference="ref-1",
    title="API",
    endpoints=[
        ApiEndpoint(
            path="/a",
            methods=[
                EndpointMethod(http_method="GET", scopes=["read:a"]),
                EndpointMethod(http_method="DELETE", scopes=["delete:a"]),
            ],
        ),
        ApiEndpoint(path="/b", methods=[EndpointMethod(http_method="PUT", scopes=["write:b", "read:a"])]),
    ],
)


class TestApiDetailRequiredScopes:
    """Test suite for ApiDetail.required_scopes."""

    def test_should_only_include_selected_endpoints(self, application: Application) -> None:
        selected = application.model_copy(
            update={"apis": [Api(id="api-1", title="API", endpoints=[Endpoint(http_method="GET", path="/a")])]}
        )

        assert CATALOGUE_API.required_scopes(selected) == {"read:a"}

    def test_should_match_methods_case_insensitively(self, application: Application) -> None:
        selected = application.model_copy(
            update={
                "apis": [
                    Api(
                        id="api-1",
                        title="API",
                        endpoints=[Endpoint(http_method="put", path="/b"), Endpoint(http_method="DELETE", path="/a")],
                    )
                ]
            }
        )

        assert CATALOGUE_API.required_scopes(selected) == {"read:a", "write:b", "delete:a"}

    def test_should_ignore_endpoints_of_other_apis(self, application: Application) -> None:
        other = application.model_copy(
            update={"apis": [Api(id="api-2", title="Other", endpoints=[Endpoint(http_method="GET", path="/a")])]}
        )

        assert CATALOGUE_API.required_scopes(other) == set()


def test_entity_type_from_path_should_accept_url_forms() -> None:
    assert EntityType.from_path("application") == EntityType.APPLICATION
    assert EntityType.from_path("access-request") == EntityType.ACCESS_REQUEST
    assert EntityType.from_path("widget") is None
