"""
Application domain models and schemas.

Applications own credentials in each HIP environment, a list of APIs they
consume and a team (either inline team members or a global team id).

Dependencies: pydantic
System role: Application API contracts and persistence shape
"""

from datetime import datetime

from pydantic import Field

from api_hub_applications.models.common import CamelModel, TeamMember

UNKNOWN_ID = "<none>"


class Creator(CamelModel):
    email: str


class Deleted(CamelModel):
    """Soft delete marker."""

    deleted: datetime
    deleted_by: str


class Credential(CamelModel):
    """An IDMS client registered for an application in one environment."""

    client_id: str
    created: datetime
    client_secret: str | None = None
    secret_fragment: str | None = None
    environment_id: str

    def with_secret(self, secret: str) -> "Credential":
        return self.model_copy(update={"client_secret": secret, "secret_fragment": secret[-4:]})

    def without_secret(self) -> "Credential":
        return self.model_copy(update={"client_secret": None})


class Endpoint(CamelModel):
    http_method: str
    path: str


class Api(CamelModel):
    id: str
    title: str
    endpoints: list[Endpoint] = Field(default_factory=list)


class Application(CamelModel):
    """Application registered by a team to consume APIs."""

    id: str | None = None
    name: str
    created: datetime
    created_by: Creator
    last_updated: datetime
    team_id: str | None = None
    team_name: str | None = None
    team_members: list[TeamMember] = Field(default_factory=list)
    credentials: list[Credential] = Field(default_factory=list)
    issues: list[str] = Field(default_factory=list)
    apis: list[Api] = Field(default_factory=list)
    deleted: Deleted | None = None

    @property
    def safe_id(self) -> str:
        return self.id or UNKNOWN_ID


class NewApplication(CamelModel):
    """Request schema for registering an application."""

    name: str = Field(..., min_length=1, max_length=255)
    created_by: Creator
    team_id: str | None = None
    team_members: list[TeamMember] = Field(default_factory=list)


class UserEmail(CamelModel):
    user_email: str = Field(..., min_length=3)


class AddApiRequest(CamelModel):
    """Request schema for adding (or replacing) an API on an application."""

    id: str
    title: str
    endpoints: list[Endpoint] = Field(default_factory=list)
    scopes: list[str] = Field(default_factory=list)

    def to_api(self) -> Api:
        return Api(id=self.id, title=self.title, endpoints=self.endpoints)


class CredentialScopes(CamelModel):
    """Scopes granted to one credential, as read from IDMS."""

    environment_id: str
    client_id: str
    created: datetime
    scopes: list[str]


class Secret(CamelModel):
    secret: str
