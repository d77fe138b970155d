"""
Shareable configuration API endpoints.

Routes: GET /config/hip-environments

Dependencies: api_hub_applications.application.services.config_service
System role: Public configuration HTTP API
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api_hub_applications.api.deps.dependencies import get_config_service, verify_authorisation
from api_hub_applications.api.routers.router_utils import json_response
from api_hub_applications.application.services import ConfigService

router = APIRouter(prefix="/config", tags=["config"], dependencies=[Depends(verify_authorisation)])


@router.get("/hip-environments")
async def hip_environments(config_service: ConfigService = Depends(get_config_service)) -> JSONResponse:
    """HIP environments without URLs or credentials."""
    return json_response(config_service.hip_environments_config())
