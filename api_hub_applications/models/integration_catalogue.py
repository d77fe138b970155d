"""
Integration catalogue wire models.

Dependencies: pydantic
System role: Integration catalogue request/response contracts
"""

from pydantic import Field

from api_hub_applications.models.application import Application
from api_hub_applications.models.common import CamelModel

HIP_PLATFORM = "HIP"


class EndpointMethod(CamelModel):
    http_method: str
    summary: str | None = None
    description: str | None = None
    scopes: list[str] = Field(default_factory=list)


class ApiEndpoint(CamelModel):
    path: str
    methods: list[EndpointMethod] = Field(default_factory=list)


class ApiDetail(CamelModel):
    id: str
    publisher_reference: str
    title: str
    description: str = ""
    version: str = ""
    platform: str = HIP_PLATFORM
    endpoints: list[ApiEndpoint] = Field(default_factory=list)
    short_description: str | None = None
    open_api_specification: str = ""
    api_status: str = "LIVE"
    team_id: str | None = None
    domain: str | None = None
    sub_domain: str | None = None
    hods: list[str] = Field(default_factory=list)

    def required_scopes(self, application: Application) -> set[str]:
        """Scopes of the endpoints of this API that the application selected."""
        selected = {
            (endpoint.path, endpoint.http_method.upper())
            for api in application.apis
            if api.id == self.id
            for endpoint in api.endpoints
        }
        return {
            scope
            for endpoint in self.endpoints
            for method in endpoint.methods
            if (endpoint.path, method.http_method.upper()) in selected
            for scope in method.scopes
        }


class ApiTeam(CamelModel):
    publisher_reference: str
    team_id: str
