"""
Deployment response mapping utilities.

APIM either accepts an OAS document or explains why it is invalid; the
latter is a client error.

Dependencies: api_hub_applications.models.apim
System role: Deployment response transformation
"""

from fastapi import status
from fastapi.responses import JSONResponse

from api_hub_applications.api.routers.router_utils.responses import json_response
from api_hub_applications.models.apim import InvalidOasResponse
from api_hub_applications.models.common import CamelModel


def map_apim_outcome_to_response(outcome: CamelModel) -> JSONResponse:
    if isinstance(outcome, InvalidOasResponse):
        return json_response(outcome, status.HTTP_400_BAD_REQUEST)
    return json_response(outcome)
