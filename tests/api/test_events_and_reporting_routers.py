"""
Test suite for the events, users, stats and config routers.

System role: Audit and reporting HTTP API verification
"""

from unittest.mock import AsyncMock

import pytest

from api_hub_applications.api.deps.dependencies import (
    get_config_service,
    get_events_service,
    get_stats_service,
    get_users_service,
)
from api_hub_applications.application.services import ConfigService
from api_hub_applications.core.exceptions import ApimException, EventNotFoundException
from api_hub_applications.models.common import UserContactDetails
from api_hub_applications.models.event import EntityType, Event, EventType
from api_hub_applications.models.integration_catalogue import ApiDetail
from api_hub_applications.models.stats import ApisInProductionStatistic

APPLICATION_ID = "65f2c0ffee0000000000bbbb"


@pytest.fixture
def event(now) -> Event:
    return Event(
        id="65f2c0ffee0000000000dddd",
        entity_id=APPLICATION_ID,
        entity_type=EntityType.APPLICATION,
        event_type=EventType.CREATED,
        user="creator@example.com",
        timestamp=now,
        description="My Application",
        parameters={"applicationName": "My Application"},
    )


@pytest.fixture
def mock_events_service():
    return AsyncMock()


@pytest.fixture
def events_client(client, mock_events_service):
    client.app.dependency_overrides[get_events_service] = lambda: mock_events_service
    return client


class TestEventsRouter:
    def test_get_event(self, events_client, mock_events_service, event):
        mock_events_service.find_by_id.return_value = event

        response = events_client.get("/api/v1/events/65f2c0ffee0000000000dddd")

        assert response.status_code == 200
        data = response.json()
        assert data["entityType"] == "APPLICATION"
        assert data["eventType"] == "CREATED"
        assert data["timestamp"].startswith("2025-03-14T09:26:53")

    def test_get_event_not_found(self, events_client, mock_events_service):
        mock_events_service.find_by_id.side_effect = EventNotFoundException.for_id("missing")

        response = events_client.get("/api/v1/events/missing")

        assert response.status_code == 404

    @pytest.mark.parametrize("path_type", ["application", "APPLICATION", "Application"])
    def test_entity_type_is_case_insensitive(self, events_client, mock_events_service, event, path_type):
        mock_events_service.find_by_entity.return_value = [event]

        response = events_client.get(f"/api/v1/events/entity/{path_type}/{APPLICATION_ID}")

        assert response.status_code == 200
        mock_events_service.find_by_entity.assert_awaited_once_with(EntityType.APPLICATION, APPLICATION_ID)

    def test_hyphenated_entity_type(self, events_client, mock_events_service):
        mock_events_service.find_by_entity.return_value = []

        response = events_client.get("/api/v1/events/entity/access-request/65f2c0ffee0000000000cccc")

        assert response.status_code == 200
        mock_events_service.find_by_entity.assert_awaited_once_with(
            EntityType.ACCESS_REQUEST, "65f2c0ffee0000000000cccc"
        )

    def test_unknown_entity_type(self, events_client, mock_events_service):
        response = events_client.get(f"/api/v1/events/entity/widget/{APPLICATION_ID}")

        assert response.status_code == 400
        mock_events_service.find_by_entity.assert_not_called()

    def test_user_events_decrypt_email(self, events_client, mock_events_service, event, crypto):
        mock_events_service.find_by_user.return_value = [event]

        response = events_client.get(f"/api/v1/events/user/{crypto.encrypt('creator@example.com')}")

        assert response.status_code == 200
        assert len(response.json()) == 1
        mock_events_service.find_by_user.assert_awaited_once_with("creator@example.com")

    def test_user_events_with_plain_email(self, events_client):
        response = events_client.get("/api/v1/events/user/creator@example.com")

        assert response.status_code == 400


class TestUsersRouter:
    def test_list_users(self, client):
        users_service = AsyncMock()
        users_service.find_all.return_value = [
            UserContactDetails(email="a@example.com"),
            UserContactDetails(email="b@example.com"),
        ]
        client.app.dependency_overrides[get_users_service] = lambda: users_service

        response = client.get("/api/v1/users")

        assert response.status_code == 200
        assert response.json() == [{"email": "a@example.com"}, {"email": "b@example.com"}]


class TestStatsRouter:
    def test_apis_in_production(self, client):
        stats_service = AsyncMock()
        stats_service.apis_in_production.return_value = ApisInProductionStatistic(total_apis=5, apis_in_production=2)
        client.app.dependency_overrides[get_stats_service] = lambda: stats_service

        response = client.get("/api/v1/stats/apis-in-production")

        assert response.status_code == 200
        assert response.json() == {"totalApis": 5, "apisInProduction": 2}

    def test_list_apis_in_production(self, client):
        stats_service = AsyncMock()
        stats_service.list_apis_in_production.return_value = [
            ApiDetail(id="api-1", publisher_reference="ref-1", title="Test API")
        ]
        client.app.dependency_overrides[get_stats_service] = lambda: stats_service

        response = client.get("/api/v1/stats/list-apis-in-production")

        assert response.status_code == 200
        assert response.json()[0]["publisherReference"] == "ref-1"

    def test_upstream_failure_is_a_bad_gateway(self, client):
        stats_service = AsyncMock()
        stats_service.apis_in_production.side_effect = ApimException.unexpected_response(500)
        client.app.dependency_overrides[get_stats_service] = lambda: stats_service

        response = client.get("/api/v1/stats/apis-in-production")

        assert response.status_code == 502


class TestConfigRouter:
    def test_hip_environments_hide_secrets(self, client, hip_environments):
        client.app.dependency_overrides[get_config_service] = lambda: ConfigService(hip_environments)

        response = client.get("/api/v1/config/hip-environments")

        assert response.status_code == 200
        data = response.json()
        assert data["productionEnvironmentId"] == "production"
        assert data["deploymentEnvironmentId"] == "test"
        assert [environment["id"] for environment in data["environments"]] == ["production", "test"]
        assert "secret" not in response.text
        assert "apim.test.example" not in response.text
