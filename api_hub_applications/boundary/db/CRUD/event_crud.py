"""
Event CRUD operations.

The user, description, detail and parameters of every event are encrypted.
Parameters are stored as one encrypted JSON string.

Dependencies: api_hub_applications.boundary.db.CRUD.base_crud, pymongo
System role: Audit event persistence
"""

import json
from typing import Any, Mapping

from pymongo import ASCENDING, IndexModel

from api_hub_applications.boundary.db.CRUD.base_crud import BaseCRUD
from api_hub_applications.core.exceptions import EventNotFoundException
from api_hub_applications.models.event import EntityType, Event


class EventCRUD(BaseCRUD[Event]):
    """CRUD operations for audit events."""

    collection_name = "events"

    def to_document(self, event: Event) -> dict[str, Any]:
        document = event.model_dump(mode="json", by_alias=True, exclude={"id"})
        document["timestamp"] = event.timestamp
        document["user"] = self.crypto.encrypt(event.user)
        document["description"] = self.crypto.encrypt(event.description)
        document["detail"] = self.crypto.encrypt(event.detail)
        document["parameters"] = self.crypto.encrypt(json.dumps(document["parameters"], sort_keys=True))
        return document

    def from_document(self, document: Mapping[str, Any]) -> Event:
        data = self._with_id(document)
        data["user"] = self.crypto.decrypt(data["user"])
        data["description"] = self.crypto.decrypt(data["description"])
        data["detail"] = self.crypto.decrypt(data["detail"])
        data["parameters"] = json.loads(self.crypto.decrypt(data["parameters"]))
        return Event.model_validate(data)

    async def ensure_indexes(self) -> None:
        await self.collection.create_indexes(
            [
                IndexModel([("entityId", ASCENDING), ("entityType", ASCENDING)], name="entity-index"),
                IndexModel([("user", ASCENDING)], name="user-index"),
            ]
        )

    async def insert(self, event: Event) -> Event:
        return await self.create(event)

    async def insert_many(self, events: list[Event]) -> list[Event]:
        return await self.create_many(events)

    async def find_by_id(self, event_id: str) -> Event:
        """
        Get an event by id.

        Raises:
            EventNotFoundException: If no event has this id
        """
        event = await self.get_by_id(event_id)
        if event is None:
            raise EventNotFoundException.for_id(event_id)
        return event

    async def find_by_entity(self, entity_type: EntityType, entity_id: str) -> list[Event]:
        return await self.find({"entityId": entity_id, "entityType": entity_type.value})

    async def find_by_user(self, user: str) -> list[Event]:
        return await self.find({"user": self.crypto.encrypt(user)})
