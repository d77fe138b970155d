"""
Team response mapping utilities.

Dependencies: api_hub_applications.models.team
System role: Team response transformation
"""

from fastapi import status
from fastapi.responses import JSONResponse

from api_hub_applications.api.routers.router_utils.responses import json_list_response, json_response
from api_hub_applications.models.team import Team


def map_team_to_response(team: Team, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return json_response(team, status_code)


def map_teams_to_response(teams: list[Team]) -> JSONResponse:
    return json_list_response(teams)
