"""
Shared fixtures for HTTP API tests.

Provides: TestClient over create_app() with the auth guard, encrypter and
HIP environments overridden

Dependencies: fastapi.testclient
System role: API test infrastructure
"""

import pytest
from fastapi.testclient import TestClient

from api_hub_applications.api.deps.dependencies import (
    get_crypto,
    get_hip_environments_dependency,
    verify_authorisation,
)
from api_hub_applications.main import create_app


@pytest.fixture
def client(crypto, hip_environments):
    """
    Client without the lifespan, so no Mongo connection is opened.

    Service dependencies are overridden per test.
    """
    client = TestClient(create_app())
    client.app.dependency_overrides[verify_authorisation] = lambda: None
    client.app.dependency_overrides[get_crypto] = lambda: crypto
    client.app.dependency_overrides[get_hip_environments_dependency] = lambda: hip_environments
    yield client
    client.app.dependency_overrides.clear()
