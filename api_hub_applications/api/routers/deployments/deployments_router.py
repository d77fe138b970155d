"""
API producer endpoints.

Routes:
- POST /deployments - Deploy a new API
- PUT /deployments/{publisher_reference} - Redeploy an API
- GET /deployments/{publisher_reference} - Deployment status in every environment
- GET /deployments/{publisher_reference}/details - Deployment metadata
- PUT /deployments/{publisher_reference}/promote - Promote between environments
- PUT /apis/{api_id}/teams/{team_id} - Change the owning team of an API
- DELETE /apis/{api_id}/teams - Remove the owning team of an API
- PUT /apis/{publisher_reference}/force-publish - Publish to the catalogue now
- GET /egresses/gateways - Egress gateways of an environment
- POST /oas/validate - Validate an OAS document
- GET /apim/{environment_id}/deployments - Deployments in an environment
- GET /apim/{environment_id}/deployments/{publisher_reference} - One deployment
- GET /apim/{environment_id}/oas/{publisher_reference} - Deployed OAS document

Dependencies: api_hub_applications.application.services.deployments_service
System role: API deployment HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse

from api_hub_applications.api.deps.dependencies import (
    get_deployments_service,
    get_hip_environment,
    get_hip_environments_dependency,
    get_query_environment,
    get_user_email,
    verify_authorisation,
)
from api_hub_applications.api.routers.router_utils.responses import json_list_response, json_response
from api_hub_applications.application.services import DeploymentsService
from api_hub_applications.configs.hip_environments import HipEnvironment, HipEnvironments
from api_hub_applications.models.apim import DeploymentsRequest, PromotionRequest, RedeploymentRequest

from .deployments_error_handling import handle_deployment_errors
from .deployments_responses import map_apim_outcome_to_response
from .deployments_validators import validate_deployments_request, validate_oas, validate_promotion

logger = logging.getLogger(__name__)

router = APIRouter(tags=["deployments"], dependencies=[Depends(verify_authorisation)])


@router.post("/deployments")
@handle_deployment_errors
async def create_deployment(
    request: DeploymentsRequest,
    deployments_service: DeploymentsService = Depends(get_deployments_service),
) -> JSONResponse:
    """
    Deploy a new API to the deployment environment.

    Raises:
        HTTPException(400): Invalid request, or APIM rejected the OAS document
        HTTPException(502): APIM or integration catalogue failure
    """
    validate_deployments_request(request)

    logger.info("Deploying API", extra={"api_name": request.name, "team_id": request.team_id})

    outcome = await deployments_service.create_api(request)
    return map_apim_outcome_to_response(outcome)


@router.put("/deployments/{publisher_reference}")
@handle_deployment_errors
async def update_deployment(
    publisher_reference: str,
    request: RedeploymentRequest,
    user_email: str = Depends(get_user_email),
    deployments_service: DeploymentsService = Depends(get_deployments_service),
) -> JSONResponse:
    validate_oas(request.oas)
    outcome = await deployments_service.update_api(publisher_reference, request, user_email)
    return map_apim_outcome_to_response(outcome)


@router.get("/deployments/{publisher_reference}")
@handle_deployment_errors
async def get_deployments(
    publisher_reference: str,
    deployments_service: DeploymentsService = Depends(get_deployments_service),
) -> JSONResponse:
    statuses = await deployments_service.get_deployments(publisher_reference)
    return json_list_response(statuses)


@router.get("/deployments/{publisher_reference}/details")
@handle_deployment_errors
async def get_deployment_details(
    publisher_reference: str,
    deployments_service: DeploymentsService = Depends(get_deployments_service),
) -> JSONResponse:
    details = await deployments_service.get_deployment_details(publisher_reference)
    return json_response(details)


@router.put("/deployments/{publisher_reference}/promote")
@handle_deployment_errors
async def promote_deployment(
    publisher_reference: str,
    request: PromotionRequest,
    hip_environments: HipEnvironments = Depends(get_hip_environments_dependency),
    deployments_service: DeploymentsService = Depends(get_deployments_service),
) -> JSONResponse:
    """
    Promote an API from one HIP environment to another.

    Raises:
        HTTPException(400): Same source and target, or APIM rejected the OAS document
        HTTPException(404): Unknown environment or publisher reference
        HTTPException(502): APIM failure
    """
    validate_promotion(request)
    outcome = await deployments_service.promote_api(
        publisher_reference,
        hip_environments.for_id(request.environment_from),
        hip_environments.for_id(request.environment_to),
        request.egress,
        request.user_email,
    )
    return map_apim_outcome_to_response(outcome)


@router.put("/apis/{api_id}/teams/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
@handle_deployment_errors
async def update_api_team(
    api_id: str,
    team_id: str,
    user_email: str = Depends(get_user_email),
    deployments_service: DeploymentsService = Depends(get_deployments_service),
) -> Response:
    await deployments_service.update_api_team(api_id, team_id, user_email)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/apis/{api_id}/teams", status_code=status.HTTP_204_NO_CONTENT)
@handle_deployment_errors
async def remove_api_team(
    api_id: str,
    deployments_service: DeploymentsService = Depends(get_deployments_service),
) -> Response:
    await deployments_service.remove_owning_team_from_api(api_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/apis/{publisher_reference}/force-publish", status_code=status.HTTP_204_NO_CONTENT)
@handle_deployment_errors
async def force_publish(
    publisher_reference: str,
    deployments_service: DeploymentsService = Depends(get_deployments_service),
) -> Response:
    await deployments_service.force_publish(publisher_reference)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/egresses/gateways")
@handle_deployment_errors
async def list_egress_gateways(
    environment: HipEnvironment = Depends(get_query_environment),
    deployments_service: DeploymentsService = Depends(get_deployments_service),
) -> JSONResponse:
    gateways = await deployments_service.list_egress_gateways(environment)
    return json_list_response(gateways)


@router.post("/oas/validate")
@handle_deployment_errors
async def validate_oas_document(
    request: Request,
    deployments_service: DeploymentsService = Depends(get_deployments_service),
) -> JSONResponse:
    """
    Validate an OAS document, sent as the raw request body.

    Raises:
        HTTPException(400): Empty body, or APIM rejected the OAS document
        HTTPException(502): APIM failure
    """
    oas = (await request.body()).decode("utf-8")
    validate_oas(oas)
    outcome = await deployments_service.validate_oas(oas)
    return map_apim_outcome_to_response(outcome)


@router.get("/apim/{environment_id}/deployments")
@handle_deployment_errors
async def list_environment_deployments(
    environment: HipEnvironment = Depends(get_hip_environment),
    deployments_service: DeploymentsService = Depends(get_deployments_service),
) -> JSONResponse:
    deployments = await deployments_service.list_deployments(environment)
    return json_list_response(deployments)


@router.get("/apim/{environment_id}/deployments/{publisher_reference}")
@handle_deployment_errors
async def get_environment_deployment(
    publisher_reference: str,
    environment: HipEnvironment = Depends(get_hip_environment),
    deployments_service: DeploymentsService = Depends(get_deployments_service),
) -> JSONResponse:
    deployment = await deployments_service.get_deployment(publisher_reference, environment)
    if deployment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"API {publisher_reference} is not deployed in {environment.id}",
        )
    return json_response(deployment)


@router.get("/apim/{environment_id}/oas/{publisher_reference}", response_class=PlainTextResponse)
@handle_deployment_errors
async def get_open_api_specification(
    publisher_reference: str,
    environment: HipEnvironment = Depends(get_hip_environment),
    deployments_service: DeploymentsService = Depends(get_deployments_service),
) -> PlainTextResponse:
    oas = await deployments_service.get_open_api_specification(publisher_reference, environment)
    return PlainTextResponse(oas)
