"""
Application API endpoints.

Routes:
- POST /applications - Register application
- GET /applications - List applications, optionally for a team member
- GET /applications/using-api/{api_id} - Applications linked to an API
- GET /applications/{id} - Get single application
- POST /applications/{id}/delete - Soft delete application
- PUT /applications/{id}/apis - Link an API
- DELETE /applications/{id}/apis/{api_id} - Unlink an API
- PUT /applications/{id}/teams/{team_id} - Change owning team
- DELETE /applications/{id}/teams - Remove owning team
- POST /applications/{id}/team-members - Add team member
- GET|POST /applications/{id}/environments/{environment_id}/credentials - List or add credentials
- DELETE /applications/{id}/environments/{environment_id}/credentials/{client_id} - Revoke credential
- GET /applications/{id}/all-scopes - Scopes of every credential
- PUT /applications/{id}/fix-scopes - Reconcile credential scopes
- POST /applications/{id}/access-requests/cancel - Cancel pending access requests

Dependencies: api_hub_applications.application.services, api_hub_applications.models
System role: Application management HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse

from api_hub_applications.api.deps.dependencies import (
    get_access_requests_service,
    get_applications_api_service,
    get_applications_credentials_service,
    get_applications_lifecycle_service,
    get_applications_search_service,
    get_hip_environment,
    get_team_member_filter,
    get_user_email,
    verify_authorisation,
)
from api_hub_applications.application.services import (
    AccessRequestsService,
    ApplicationsApiService,
    ApplicationsCredentialsService,
    ApplicationsLifecycleService,
    ApplicationsSearchService,
)
from api_hub_applications.configs.hip_environments import HipEnvironment
from api_hub_applications.models.application import AddApiRequest, NewApplication, UserEmail
from api_hub_applications.models.common import TeamMember

from .applications_error_handling import handle_application_errors
from .applications_responses import (
    map_application_to_response,
    map_applications_to_response,
    map_credential_to_response,
    map_credentials_to_response,
    map_scopes_to_response,
)
from .applications_validators import validate_add_api, validate_email, validate_new_application

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applications", tags=["applications"], dependencies=[Depends(verify_authorisation)])


@router.post("", status_code=status.HTTP_201_CREATED)
@handle_application_errors
async def register_application(
    request: NewApplication,
    lifecycle_service: ApplicationsLifecycleService = Depends(get_applications_lifecycle_service),
) -> JSONResponse:
    """
    Register an application and its credentials.

    Raises:
        HTTPException(400): Invalid request
        HTTPException(404): Named team does not exist
        HTTPException(502): IDMS failure
    """
    validate_new_application(request)

    logger.info("Registering application", extra={"application_name": request.name})

    application = await lifecycle_service.register_application(request, request.created_by.email)
    return map_application_to_response(application, status.HTTP_201_CREATED)


@router.get("")
@handle_application_errors
async def list_applications(
    team_member: str | None = Depends(get_team_member_filter),
    include_deleted: bool = Query(default=False, alias="includeDeleted"),
    search_service: ApplicationsSearchService = Depends(get_applications_search_service),
) -> JSONResponse:
    """
    List applications.

    Args:
        team_member: Decrypted teamMember query parameter, when given
        include_deleted: Include soft deleted applications
        search_service: Injected ApplicationsSearchService

    Returns:
        JSONResponse: Applications sorted by name
    """
    applications = await search_service.find_all(team_member, include_deleted)
    return map_applications_to_response(applications)


@router.get("/using-api/{api_id}")
@handle_application_errors
async def list_applications_using_api(
    api_id: str,
    include_deleted: bool = Query(default=False, alias="includeDeleted"),
    search_service: ApplicationsSearchService = Depends(get_applications_search_service),
) -> JSONResponse:
    applications = await search_service.find_all_using_api(api_id, include_deleted)
    return map_applications_to_response(applications)


@router.get("/{application_id}")
@handle_application_errors
async def get_application(
    application_id: str,
    enrich: bool = Query(default=False),
    include_deleted: bool = Query(default=False, alias="includeDeleted"),
    search_service: ApplicationsSearchService = Depends(get_applications_search_service),
) -> JSONResponse:
    """
    Get single application.

    Raises:
        HTTPException(404): Application not found
    """
    application = await search_service.find_by_id(application_id, enrich=enrich, include_deleted=include_deleted)
    return map_application_to_response(application)


@router.post("/{application_id}/delete", status_code=status.HTTP_204_NO_CONTENT)
@handle_application_errors
async def delete_application(
    application_id: str,
    request: UserEmail,
    lifecycle_service: ApplicationsLifecycleService = Depends(get_applications_lifecycle_service),
) -> Response:
    """
    Soft delete an application and revoke its credentials.

    Raises:
        HTTPException(404): Application not found
        HTTPException(502): IDMS failure
    """
    await lifecycle_service.delete(application_id, request.user_email)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{application_id}/apis", status_code=status.HTTP_204_NO_CONTENT)
@handle_application_errors
async def add_api(
    application_id: str,
    request: AddApiRequest,
    user_email: str = Depends(get_user_email),
    api_service: ApplicationsApiService = Depends(get_applications_api_service),
) -> Response:
    validate_add_api(request)
    await api_service.add_api(application_id, request, user_email)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{application_id}/apis/{api_id}", status_code=status.HTTP_204_NO_CONTENT)
@handle_application_errors
async def remove_api(
    application_id: str,
    api_id: str,
    user_email: str = Query(..., alias="userEmail"),
    api_service: ApplicationsApiService = Depends(get_applications_api_service),
) -> Response:
    await api_service.remove_api(application_id, api_id, user_email)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{application_id}/teams/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
@handle_application_errors
async def change_owning_team(
    application_id: str,
    team_id: str,
    user_email: str = Query(..., alias="userEmail"),
    api_service: ApplicationsApiService = Depends(get_applications_api_service),
) -> Response:
    await api_service.change_owning_team(application_id, team_id, user_email)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{application_id}/teams", status_code=status.HTTP_204_NO_CONTENT)
@handle_application_errors
async def remove_owning_team(
    application_id: str,
    api_service: ApplicationsApiService = Depends(get_applications_api_service),
) -> Response:
    await api_service.remove_owning_team(application_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{application_id}/team-members", status_code=status.HTTP_204_NO_CONTENT)
@handle_application_errors
async def add_team_member(
    application_id: str,
    request: TeamMember,
    lifecycle_service: ApplicationsLifecycleService = Depends(get_applications_lifecycle_service),
) -> Response:
    """
    Add a team member to an application.

    Raises:
        HTTPException(400): Already a member, or not an email address
        HTTPException(404): Application not found
    """
    validate_email(request.email, "email")
    await lifecycle_service.add_team_member(application_id, request)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{application_id}/environments/{environment_id}/credentials")
@handle_application_errors
async def get_credentials(
    application_id: str,
    environment: HipEnvironment = Depends(get_hip_environment),
    credentials_service: ApplicationsCredentialsService = Depends(get_applications_credentials_service),
) -> JSONResponse:
    credentials = await credentials_service.get_credentials(application_id, environment)
    return map_credentials_to_response(credentials)


@router.post("/{application_id}/environments/{environment_id}/credentials", status_code=status.HTTP_201_CREATED)
@handle_application_errors
async def add_credential(
    application_id: str,
    request: UserEmail,
    environment: HipEnvironment = Depends(get_hip_environment),
    credentials_service: ApplicationsCredentialsService = Depends(get_applications_credentials_service),
) -> JSONResponse:
    """
    Issue a credential in an environment.

    Raises:
        HTTPException(400): Credential limit reached
        HTTPException(404): Application or environment not found
        HTTPException(502): IDMS failure
    """
    credential = await credentials_service.add_credential(application_id, environment, request.user_email)
    return map_credential_to_response(credential)


@router.delete(
    "/{application_id}/environments/{environment_id}/credentials/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
@handle_application_errors
async def delete_credential(
    application_id: str,
    client_id: str,
    user_email: str = Query(..., alias="userEmail"),
    environment: HipEnvironment = Depends(get_hip_environment),
    credentials_service: ApplicationsCredentialsService = Depends(get_applications_credentials_service),
) -> Response:
    """
    Revoke a credential.

    Raises:
        HTTPException(400): Last credential in the environment
        HTTPException(404): Application, environment or credential not found
    """
    await credentials_service.delete_credential(application_id, environment, client_id, user_email)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{application_id}/all-scopes")
@handle_application_errors
async def get_all_scopes(
    application_id: str,
    search_service: ApplicationsSearchService = Depends(get_applications_search_service),
) -> JSONResponse:
    scopes = await search_service.fetch_all_scopes(application_id)
    return map_scopes_to_response(scopes)


@router.put("/{application_id}/fix-scopes", status_code=status.HTTP_204_NO_CONTENT)
@handle_application_errors
async def fix_scopes(
    application_id: str,
    user_email: str = Depends(get_user_email),
    api_service: ApplicationsApiService = Depends(get_applications_api_service),
) -> Response:
    await api_service.fix_scopes(application_id, user_email)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{application_id}/access-requests/cancel", status_code=status.HTTP_204_NO_CONTENT)
@handle_application_errors
async def cancel_access_requests(
    application_id: str,
    request: UserEmail,
    access_requests_service: AccessRequestsService = Depends(get_access_requests_service),
) -> Response:
    await access_requests_service.cancel_access_requests(application_id, None, request.user_email)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
