"""
Team API endpoints.

Routes:
- POST /teams - Create team
- GET /teams - List teams, optionally for a team member or by name
- GET /teams/{team_id} - Get single team
- GET /teams/name/{name} - Get team by name
- PUT /teams/{team_id}/members - Add team member
- DELETE /teams/{team_id}/members/{encrypted_email} - Remove team member
- PUT /teams/{team_id}/name - Rename team

Dependencies: api_hub_applications.application.services.teams_service
System role: Team management HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse

from api_hub_applications.api.deps.dependencies import (
    decrypt_email,
    get_crypto,
    get_team_member_filter,
    get_teams_service,
    get_user_email,
    verify_authorisation,
)
from api_hub_applications.application.services import TeamsService
from api_hub_applications.core.crypto import SensitiveCrypto
from api_hub_applications.models.team import NewTeam, RenameTeamRequest, TeamMemberRequest

from .teams_error_handling import handle_team_errors
from .teams_responses import map_team_to_response, map_teams_to_response
from .teams_validators import validate_new_team, validate_rename, validate_team_member

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/teams", tags=["teams"], dependencies=[Depends(verify_authorisation)])


@router.post("", status_code=status.HTTP_201_CREATED)
@handle_team_errors
async def create_team(
    request: NewTeam,
    user_email: str | None = Query(default=None, alias="userEmail"),
    teams_service: TeamsService = Depends(get_teams_service),
) -> JSONResponse:
    """
    Create a team.

    The creating user defaults to the first team member.

    Raises:
        HTTPException(400): Invalid request
        HTTPException(409): Team name already in use
    """
    validate_new_team(request)

    logger.info("Creating team", extra={"team_name": request.name})

    team = await teams_service.create(request, user_email or request.team_members[0].email)
    return map_team_to_response(team, status.HTTP_201_CREATED)


@router.get("")
@handle_team_errors
async def list_teams(
    team_member: str | None = Depends(get_team_member_filter),
    name: str | None = Query(default=None),
    teams_service: TeamsService = Depends(get_teams_service),
) -> JSONResponse:
    teams = await teams_service.find_all(team_member, name)
    return map_teams_to_response(teams)


@router.get("/name/{name}")
@handle_team_errors
async def get_team_by_name(
    name: str,
    teams_service: TeamsService = Depends(get_teams_service),
) -> JSONResponse:
    team = await teams_service.find_by_name(name)
    return map_team_to_response(team)


@router.get("/{team_id}")
@handle_team_errors
async def get_team(
    team_id: str,
    teams_service: TeamsService = Depends(get_teams_service),
) -> JSONResponse:
    """
    Get single team.

    Raises:
        HTTPException(404): Team not found
    """
    team = await teams_service.find_by_id(team_id)
    return map_team_to_response(team)


@router.put("/{team_id}/members", status_code=status.HTTP_204_NO_CONTENT)
@handle_team_errors
async def add_team_member(
    team_id: str,
    request: TeamMemberRequest,
    user_email: str = Depends(get_user_email),
    teams_service: TeamsService = Depends(get_teams_service),
) -> Response:
    """
    Add a member to a team.

    Raises:
        HTTPException(400): Already a member, or not an email address
        HTTPException(404): Team not found
    """
    validate_team_member(request)
    await teams_service.add_team_member(team_id, request, user_email)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{team_id}/members/{encrypted_email}", status_code=status.HTTP_204_NO_CONTENT)
@handle_team_errors
async def remove_team_member(
    team_id: str,
    encrypted_email: str,
    user_email: str = Depends(get_user_email),
    crypto: SensitiveCrypto = Depends(get_crypto),
    teams_service: TeamsService = Depends(get_teams_service),
) -> Response:
    """
    Remove a member from a team.

    Raises:
        HTTPException(400): Email cannot be decrypted
        HTTPException(404): Team not found, or not a member
        HTTPException(409): Last member of the team
    """
    email = decrypt_email(crypto, encrypted_email)
    await teams_service.remove_team_member(team_id, email, user_email)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{team_id}/name", status_code=status.HTTP_204_NO_CONTENT)
@handle_team_errors
async def rename_team(
    team_id: str,
    request: RenameTeamRequest,
    user_email: str = Depends(get_user_email),
    teams_service: TeamsService = Depends(get_teams_service),
) -> Response:
    validate_rename(request)
    await teams_service.rename_team(team_id, request, user_email)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
