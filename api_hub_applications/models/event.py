"""
Audit event models.

Events record who did what to which entity. Parameters are free-form
key/value pairs describing the change.

Dependencies: pydantic
System role: Audit trail contracts
"""

import enum
from datetime import datetime
from typing import Any

from pydantic import Field

from api_hub_applications.models.common import CamelModel


class EntityType(str, enum.Enum):
    APPLICATION = "APPLICATION"
    ACCESS_REQUEST = "ACCESS_REQUEST"
    TEAM = "TEAM"
    API = "API"

    @classmethod
    def from_path(cls, value: str) -> "EntityType | None":
        normalised = value.upper().replace("-", "_")
        return cls.__members__.get(normalised)


class EventType(str, enum.Enum):
    API_ADDED = "API_ADDED"
    EGRESS_ADDED = "EGRESS_ADDED"
    MEMBER_ADDED = "MEMBER_ADDED"
    APPROVED = "APPROVED"
    CANCELLED = "CANCELLED"
    TEAM_CHANGED = "TEAM_CHANGED"
    CREATED = "CREATED"
    CREDENTIAL_CREATED = "CREDENTIAL_CREATED"
    DELETED = "DELETED"
    SCOPES_FIXED = "SCOPES_FIXED"
    PROMOTED = "PROMOTED"
    REGISTERED = "REGISTERED"
    REJECTED = "REJECTED"
    API_REMOVED = "API_REMOVED"
    EGRESS_REMOVED = "EGRESS_REMOVED"
    MEMBER_REMOVED = "MEMBER_REMOVED"
    RENAMED = "RENAMED"
    CREDENTIAL_REVOKED = "CREDENTIAL_REVOKED"
    UPDATED = "UPDATED"


class Event(CamelModel):
    id: str | None = None
    entity_id: str
    entity_type: EntityType
    event_type: EventType
    user: str
    timestamp: datetime
    description: str = ""
    detail: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def new_event(
        cls,
        entity_id: str,
        entity_type: EntityType,
        event_type: EventType,
        user: str,
        timestamp: datetime,
        description: str = "",
        detail: str = "",
        **parameters: Any,
    ) -> "Event":
        """Build an unsaved event, dropping parameters whose value is None."""
        return cls(
            entity_id=entity_id,
            entity_type=entity_type,
            event_type=event_type,
            user=user,
            timestamp=timestamp,
            description=description,
            detail=detail,
            parameters={key: value for key, value in parameters.items() if value is not None},
        )
