"""
Access request audit events.

Access request events are recorded against the requesting application.

Dependencies: api_hub_applications.application.services.events_service
System role: Builds access request events
"""

from datetime import datetime

from api_hub_applications.application.services.events_service import EventsService
from api_hub_applications.models.access_request import AccessRequest
from api_hub_applications.models.event import EntityType, Event, EventType


def _parameters(access_request: AccessRequest) -> dict:
    return {
        "accessRequestId": access_request.id,
        "apiId": access_request.api_id,
        "apiTitle": access_request.api_name,
        "environmentId": access_request.environment_id,
    }


class AccessRequestsEventService:
    def __init__(self, events_service: EventsService) -> None:
        self.events_service = events_service

    def _event(self, access_request: AccessRequest, event_type: EventType, user: str, timestamp: datetime) -> Event:
        return Event.new_event(
            entity_id=access_request.application_id,
            entity_type=EntityType.APPLICATION,
            event_type=event_type,
            user=user,
            timestamp=timestamp,
            **_parameters(access_request),
        )

    async def create(self, access_requests: list[AccessRequest], user: str, timestamp: datetime) -> None:
        await self.events_service.log_many(
            [self._event(access_request, EventType.CREATED, user, timestamp) for access_request in access_requests]
        )

    async def approve(self, access_request: AccessRequest, user: str, timestamp: datetime) -> None:
        await self.events_service.log(self._event(access_request, EventType.APPROVED, user, timestamp))

    async def reject(self, access_request: AccessRequest, user: str, timestamp: datetime) -> None:
        event = self._event(access_request, EventType.REJECTED, user, timestamp)
        if access_request.decision and access_request.decision.rejected_reason:
            event.parameters["rejectedReason"] = access_request.decision.rejected_reason
        await self.events_service.log(event)

    async def cancel(self, access_request: AccessRequest, user: str, timestamp: datetime) -> None:
        await self.events_service.log(self._event(access_request, EventType.CANCELLED, user, timestamp))
