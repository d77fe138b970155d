"""
Shared test fixtures and configuration for entire test suite.

Provides: HIP environments, encrypter, fixed clock, sample applications,
teams and access requests, and mocked connectors
Dependencies: pytest
System role: Test infrastructure and fixture management
"""

import base64
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from api_hub_applications.configs.hip_environments import HipEnvironment, HipEnvironments
from api_hub_applications.core.crypto import SensitiveCrypto
from api_hub_applications.models.access_request import (
    AccessRequest,
    AccessRequestEndpoint,
    AccessRequestStatus,
)
from api_hub_applications.models.application import Application, Creator, Credential
from api_hub_applications.models.common import TeamMember
from api_hub_applications.models.team import Team

NOW = datetime(2025, 3, 14, 9, 26, 53, tzinfo=timezone.utc)
TEST_KEY = base64.b64encode(b"0123456789abcdef0123456789abcdef").decode("ascii")


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock():
    """Clock returning a fixed instant."""
    return lambda: NOW


@pytest.fixture
def production() -> HipEnvironment:
    return HipEnvironment(
        id="production",
        name="Production",
        rank=1,
        is_production_like=True,
        apim_url="https://apim.production.example",
        client_id="production-client-id",
        secret="production-secret",
        apim_environment_name="production",
    )


@pytest.fixture
def test_environment() -> HipEnvironment:
    return HipEnvironment(
        id="test",
        name="Test",
        rank=2,
        is_production_like=False,
        apim_url="https://apim.test.example",
        client_id="test-client-id",
        secret="test-secret",
        use_proxy=True,
        api_key="test-api-key",
        promote_to="production",
        apim_environment_name="test",
    )


@pytest.fixture
def hip_environments(production: HipEnvironment, test_environment: HipEnvironment) -> HipEnvironments:
    return HipEnvironments(
        environments=[production, test_environment],
        production_environment="production",
        deployment_environment="test",
        validation_environment="production",
    )


@pytest.fixture
def crypto() -> SensitiveCrypto:
    return SensitiveCrypto.from_base64(TEST_KEY)


@pytest.fixture
def team() -> Team:
    return Team(
        id="65f2c0ffee0000000000aaaa",
        name="Team Rocket",
        created=NOW - timedelta(days=30),
        team_members=[TeamMember(email="jessie@example.com"), TeamMember(email="james@example.com")],
    )


@pytest.fixture
def production_credential() -> Credential:
    """A hidden production credential: no secret was ever exposed."""
    return Credential(
        client_id="production-client",
        created=NOW - timedelta(days=10),
        environment_id="production",
    )


@pytest.fixture
def test_credential() -> Credential:
    return Credential(
        client_id="test-client",
        created=NOW - timedelta(days=10),
        client_secret="test-secret-1234",
        secret_fragment="1234",
        environment_id="test",
    )


@pytest.fixture
def application(production_credential: Credential, test_credential: Credential) -> Application:
    return Application(
        id="65f2c0ffee0000000000bbbb",
        name="My Application",
        created=NOW - timedelta(days=10),
        created_by=Creator(email="creator@example.com"),
        last_updated=NOW - timedelta(days=1),
        team_members=[TeamMember(email="creator@example.com")],
        credentials=[production_credential, test_credential],
    )


@pytest.fixture
def access_request(application: Application) -> AccessRequest:
    return AccessRequest(
        id="65f2c0ffee0000000000cccc",
        application_id=application.id,
        api_id="api-1",
        api_name="Test API",
        status=AccessRequestStatus.PENDING,
        endpoints=[
            AccessRequestEndpoint(http_method="GET", path="/things", scopes=["read:things"]),
            AccessRequestEndpoint(http_method="POST", path="/things", scopes=["write:things", "read:things"]),
        ],
        supporting_information="Needed for the thing service",
        requested=NOW - timedelta(hours=1),
        requested_by="requester@example.com",
        environment_id="production",
    )


@pytest.fixture
def mock_idms() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_email() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_event_service() -> AsyncMock:
    return AsyncMock()
