"""
Audit events service.

Writes events when EVENTS_ENABLED is set and reads them back by id,
entity or user. A failed write never fails the operation being audited.

Dependencies: api_hub_applications.boundary.db.CRUD.event_crud
System role: Audit trail
"""

import logging

from api_hub_applications.boundary.db.CRUD.event_crud import EventCRUD
from api_hub_applications.models.event import EntityType, Event

logger = logging.getLogger(__name__)


class EventsService:
    """Audit event logging and lookup."""

    def __init__(self, repository: EventCRUD, enabled: bool = True) -> None:
        """
        Initialize events service.

        Args:
            repository: Event persistence
            enabled: When False, log() and log_many() do nothing
        """
        self.repository = repository
        self.enabled = enabled

    async def log(self, event: Event) -> None:
        if not self.enabled:
            return
        try:
            await self.repository.insert(event)
        except Exception as e:
            logger.warning(
                "Failed to log an event",
                extra={
                    "entity_type": event.entity_type.value,
                    "entity_id": event.entity_id,
                    "event_type": event.event_type.value,
                    "error": str(e),
                },
            )

    async def log_many(self, events: list[Event]) -> None:
        if not self.enabled or not events:
            return
        try:
            await self.repository.insert_many(events)
        except Exception as e:
            logger.warning("Failed to log events", extra={"count": len(events), "error": str(e)})

    async def find_by_id(self, event_id: str) -> Event:
        return await self.repository.find_by_id(event_id)

    async def find_by_entity(self, entity_type: EntityType, entity_id: str) -> list[Event]:
        return await self.repository.find_by_entity(entity_type, entity_id)

    async def find_by_user(self, user: str) -> list[Event]:
        return await self.repository.find_by_user(user)
