"""
Audit event API endpoints.

Routes: GET /events/{id}, GET /events/entity/{entity_type}/{entity_id}, GET /events/user/{encrypted_email}

Dependencies: api_hub_applications.application.services.events_service
System role: Audit trail HTTP API
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from api_hub_applications.api.deps.dependencies import (
    decrypt_email,
    get_crypto,
    get_events_service,
    verify_authorisation,
)
from api_hub_applications.api.routers.router_utils import json_list_response, json_response, to_http_exception
from api_hub_applications.application.services import EventsService
from api_hub_applications.core.crypto import SensitiveCrypto
from api_hub_applications.core.exceptions import EventNotFoundException
from api_hub_applications.models.event import EntityType

router = APIRouter(prefix="/events", tags=["events"], dependencies=[Depends(verify_authorisation)])


@router.get("/entity/{entity_type}/{entity_id}")
async def get_entity_events(
    entity_type: str,
    entity_id: str,
    events_service: EventsService = Depends(get_events_service),
) -> JSONResponse:
    """
    Events for one entity, oldest first.

    Raises:
        HTTPException(400): Unknown entity type
    """
    resolved = EntityType.from_path(entity_type)
    if resolved is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown entity type: {entity_type}")
    events = await events_service.find_by_entity(resolved, entity_id)
    return json_list_response(events)


@router.get("/user/{encrypted_email}")
async def get_user_events(
    encrypted_email: str,
    crypto: SensitiveCrypto = Depends(get_crypto),
    events_service: EventsService = Depends(get_events_service),
) -> JSONResponse:
    events = await events_service.find_by_user(decrypt_email(crypto, encrypted_email))
    return json_list_response(events)


@router.get("/{event_id}")
async def get_event(
    event_id: str,
    events_service: EventsService = Depends(get_events_service),
) -> JSONResponse:
    try:
        event = await events_service.find_by_id(event_id)
    except EventNotFoundException as e:
        raise to_http_exception(e, "Event", event_id=event_id) from e
    return json_response(event)
