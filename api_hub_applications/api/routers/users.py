"""
User API endpoints.

Routes: GET /users

Dependencies: api_hub_applications.application.services.users_service
System role: User directory HTTP API
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api_hub_applications.api.deps.dependencies import get_users_service, verify_authorisation
from api_hub_applications.api.routers.router_utils import json_list_response
from api_hub_applications.application.services import UsersService

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(verify_authorisation)])


@router.get("")
async def list_users(users_service: UsersService = Depends(get_users_service)) -> JSONResponse:
    """Every distinct user email known to applications and teams, sorted."""
    users = await users_service.find_all()
    return json_list_response(users)
