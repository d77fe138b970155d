"""
Common model utilities.

Base schema with camelCase JSON aliases, the shared team member type,
error response schema and the clock used to timestamp records.

Dependencies: pydantic
System role: Common API structures
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Current time in UTC, truncated to milliseconds as Mongo stores it."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


class CamelModel(BaseModel):
    """Base model serialised with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TeamMember(CamelModel):
    """A member of a team or application, identified by email."""

    email: str


class ErrorResponse(BaseModel):
    """Error response schema."""

    reason: str = Field(description="Error category")
    description: str = Field(description="Error message")


class UserContactDetails(CamelModel):
    email: str
