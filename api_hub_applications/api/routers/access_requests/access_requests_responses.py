"""
Access request response mapping utilities.

Dependencies: api_hub_applications.models.access_request
System role: Access request response transformation
"""

from fastapi import status
from fastapi.responses import JSONResponse

from api_hub_applications.api.routers.router_utils.responses import json_list_response, json_response
from api_hub_applications.models.access_request import AccessRequest


def map_access_request_to_response(access_request: AccessRequest) -> JSONResponse:
    return json_response(access_request)


def map_access_requests_to_response(
    access_requests: list[AccessRequest],
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    return json_list_response(access_requests, status_code)
