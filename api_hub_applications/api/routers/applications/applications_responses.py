"""
Application response mapping utilities.

Dependencies: api_hub_applications.models.application
System role: Application response transformation
"""

from fastapi import status
from fastapi.responses import JSONResponse

from api_hub_applications.api.routers.router_utils.responses import json_list_response, json_response
from api_hub_applications.models.application import Application, Credential, CredentialScopes


def map_application_to_response(application: Application, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return json_response(application, status_code)


def map_applications_to_response(applications: list[Application]) -> JSONResponse:
    return json_list_response(applications)


def map_credential_to_response(credential: Credential) -> JSONResponse:
    """New credentials are returned once, with their secret."""
    return json_response(credential, status.HTTP_201_CREATED)


def map_credentials_to_response(credentials: list[Credential]) -> JSONResponse:
    return json_list_response(credentials)


def map_scopes_to_response(scopes: list[CredentialScopes]) -> JSONResponse:
    return json_list_response(scopes)
