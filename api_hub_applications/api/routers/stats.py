"""
Statistics API endpoints.

Routes: GET /stats/apis-in-production, GET /stats/list-apis-in-production

Dependencies: api_hub_applications.application.services.stats_service
System role: Reporting HTTP API
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api_hub_applications.api.deps.dependencies import get_stats_service, verify_authorisation
from api_hub_applications.api.routers.router_utils import json_list_response, json_response, to_http_exception
from api_hub_applications.application.services import StatsService
from api_hub_applications.core.exceptions import UPSTREAM_EXCEPTIONS

router = APIRouter(prefix="/stats", tags=["stats"], dependencies=[Depends(verify_authorisation)])


@router.get("/apis-in-production")
async def apis_in_production(stats_service: StatsService = Depends(get_stats_service)) -> JSONResponse:
    """
    Count HIP APIs and how many are deployed to production.

    Raises:
        HTTPException(502): APIM or integration catalogue failure
    """
    try:
        statistic = await stats_service.apis_in_production()
    except UPSTREAM_EXCEPTIONS as e:
        raise to_http_exception(e, "Statistics") from e
    return json_response(statistic)


@router.get("/list-apis-in-production")
async def list_apis_in_production(stats_service: StatsService = Depends(get_stats_service)) -> JSONResponse:
    try:
        apis = await stats_service.list_apis_in_production()
    except UPSTREAM_EXCEPTIONS as e:
        raise to_http_exception(e, "Statistics") from e
    return json_list_response(apis)
