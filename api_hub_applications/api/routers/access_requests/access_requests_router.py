"""
Access request API endpoints.

Routes:
- POST /access-requests - Request API access for an application
- GET /access-requests - List access requests by application and status
- GET /access-requests/{id} - Get single access request
- PUT /access-requests/{id}/approve - Approve and grant scopes
- PUT /access-requests/{id}/reject - Reject with a reason
- PUT /access-requests/{id}/cancel - Cancel

Dependencies: api_hub_applications.application.services.access_requests_service
System role: Access request HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse

from api_hub_applications.api.deps.dependencies import (
    get_access_requests_service,
    get_hip_environments_dependency,
    verify_authorisation,
)
from api_hub_applications.application.services import AccessRequestsService
from api_hub_applications.configs.hip_environments import HipEnvironments
from api_hub_applications.models.access_request import (
    AccessRequestCancelRequest,
    AccessRequestDecisionRequest,
    AccessRequestRequest,
    AccessRequestStatus,
)

from .access_requests_error_handling import handle_access_request_errors
from .access_requests_responses import map_access_request_to_response, map_access_requests_to_response
from .access_requests_validators import validate_access_request_request, validate_rejection

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/access-requests", tags=["access-requests"], dependencies=[Depends(verify_authorisation)])


@router.post("", status_code=status.HTTP_201_CREATED)
@handle_access_request_errors
async def create_access_requests(
    request: AccessRequestRequest,
    hip_environments: HipEnvironments = Depends(get_hip_environments_dependency),
    access_requests_service: AccessRequestsService = Depends(get_access_requests_service),
) -> JSONResponse:
    """
    Raise one access request per requested API.

    Raises:
        HTTPException(400): Invalid request
        HTTPException(404): Application not found
    """
    validate_access_request_request(request, hip_environments)

    logger.info(
        "Creating access requests",
        extra={"application_id": request.application_id, "api_count": len(request.apis)},
    )

    access_requests = await access_requests_service.create_access_requests(request)
    return map_access_requests_to_response(access_requests, status.HTTP_201_CREATED)


@router.get("")
@handle_access_request_errors
async def list_access_requests(
    application_id: str | None = Query(default=None, alias="applicationId"),
    access_request_status: AccessRequestStatus | None = Query(default=None, alias="status"),
    access_requests_service: AccessRequestsService = Depends(get_access_requests_service),
) -> JSONResponse:
    access_requests = await access_requests_service.get_access_requests(application_id, access_request_status)
    return map_access_requests_to_response(access_requests)


@router.get("/{access_request_id}")
@handle_access_request_errors
async def get_access_request(
    access_request_id: str,
    access_requests_service: AccessRequestsService = Depends(get_access_requests_service),
) -> JSONResponse:
    access_request = await access_requests_service.get_access_request(access_request_id)
    return map_access_request_to_response(access_request)


@router.put("/{access_request_id}/approve", status_code=status.HTTP_204_NO_CONTENT)
@handle_access_request_errors
async def approve_access_request(
    access_request_id: str,
    request: AccessRequestDecisionRequest,
    access_requests_service: AccessRequestsService = Depends(get_access_requests_service),
) -> Response:
    """
    Approve a pending access request.

    Raises:
        HTTPException(400): Access request is not pending
        HTTPException(404): Access request or application not found
        HTTPException(502): Scopes could not be granted
    """
    await access_requests_service.approve_access_request(access_request_id, request)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{access_request_id}/reject", status_code=status.HTTP_204_NO_CONTENT)
@handle_access_request_errors
async def reject_access_request(
    access_request_id: str,
    request: AccessRequestDecisionRequest,
    access_requests_service: AccessRequestsService = Depends(get_access_requests_service),
) -> Response:
    validate_rejection(request)
    await access_requests_service.reject_access_request(access_request_id, request)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{access_request_id}/cancel", status_code=status.HTTP_204_NO_CONTENT)
@handle_access_request_errors
async def cancel_access_request(
    access_request_id: str,
    request: AccessRequestCancelRequest,
    access_requests_service: AccessRequestsService = Depends(get_access_requests_service),
) -> Response:
    await access_requests_service.cancel_access_request(access_request_id, request.cancelled_by)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
