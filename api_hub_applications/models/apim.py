"""
API Management Platform wire models.

Deployment requests and the validation/deployment responses returned by
the simple API deployment endpoints.

Dependencies: pydantic
System role: APIM request/response contracts
"""

import enum
from datetime import datetime
from typing import Any

from pydantic import Field

from api_hub_applications.models.common import CamelModel

EGRESS_FALLBACK = "emulator"


class EgressMapping(CamelModel):
    prefix: str
    egress_prefix: str


class DeploymentsRequest(CamelModel):
    """Request schema for a new API deployment."""

    line_of_business: str
    name: str
    description: str
    egress: str | None = None
    team_id: str
    oas: str
    passthrough: bool = False
    status: str
    domain: str
    sub_domain: str
    hods: list[str] = Field(default_factory=list)
    prefixes_to_remove: list[str] = Field(default_factory=list)
    egress_mappings: list[EgressMapping] | None = None

    def to_metadata(self) -> dict[str, Any]:
        """Metadata part of the multipart deployment request."""
        metadata = {
            "lineOfBusiness": self.line_of_business,
            "name": self.name,
            "description": self.description,
            "egress": self.egress or EGRESS_FALLBACK,
            "passthrough": self.passthrough,
            "status": self.status,
            "domain": self.domain,
            "subdomain": self.sub_domain,
            "backends": self.hods,
            "prefixesToRemove": self.prefixes_to_remove,
        }
        if self.egress_mappings is not None:
            metadata["egressMappings"] = [mapping.to_json_dict() for mapping in self.egress_mappings]
        return metadata


class RedeploymentRequest(CamelModel):
    """Request schema for redeploying an existing API."""

    description: str
    oas: str
    status: str
    domain: str
    sub_domain: str
    hods: list[str] = Field(default_factory=list)
    prefixes_to_remove: list[str] = Field(default_factory=list)
    egress_mappings: list[EgressMapping] | None = None
    egress: str | None = None

    def to_metadata(self) -> dict[str, Any]:
        metadata = {
            "description": self.description,
            "status": self.status,
            "domain": self.domain,
            "subdomain": self.sub_domain,
            "backends": self.hods,
            "prefixesToRemove": self.prefixes_to_remove,
            "egress": self.egress or EGRESS_FALLBACK,
        }
        if self.egress_mappings is not None:
            metadata["egressMappings"] = [mapping.to_json_dict() for mapping in self.egress_mappings]
        return metadata


class ValidationFailure(CamelModel):
    type: str
    message: str


class FailuresResponse(CamelModel):
    code: str
    reason: str
    errors: list[ValidationFailure] | None = None


class InvalidOasResponse(CamelModel):
    failure: FailuresResponse


class SuccessfulValidateResponse(CamelModel):
    valid: bool = True


class SuccessfulDeploymentsResponse(CamelModel):
    id: str
    version: str
    merge_request_iid: int
    uri: str


class SuccessfulDeploymentResponse(CamelModel):
    id: str
    deployment_timestamp: datetime | None = None
    deployment_version: str | None = None
    oas_version: str
    build_version: str | None = None


class DeploymentDetails(CamelModel):
    description: str | None = None
    status: str | None = None
    domain: str | None = None
    sub_domain: str | None = None
    hods: list[str] | None = None
    egress_mappings: list[EgressMapping] | None = None
    prefixes_to_remove: list[str] = Field(default_factory=list)
    egress: str | None = None


class DetailsResponse(CamelModel):
    """Raw details returned by APIM, mapped onto DeploymentDetails."""

    description: str
    status: str
    domain: str
    subdomain: str
    backends: list[str] = Field(default_factory=list)
    egress: str | None = None
    prefixes_to_remove: list[str] | None = None
    egress_mappings: list[EgressMapping] | None = None

    def to_deployment_details(self) -> DeploymentDetails:
        egress = self.egress.strip() if self.egress else None
        return DeploymentDetails(
            description=self.description,
            status=self.status,
            domain=self.domain,
            sub_domain=self.subdomain,
            hods=self.backends,
            egress_mappings=self.egress_mappings,
            prefixes_to_remove=self.prefixes_to_remove or [],
            egress=egress or None,
        )


class PromotionRequest(CamelModel):
    environment_from: str
    environment_to: str
    egress: str
    user_email: str


class EgressGateway(CamelModel):
    id: str
    friendly_name: str


class DeploymentState(str, enum.Enum):
    DEPLOYED = "DEPLOYED"
    NOT_DEPLOYED = "NOT_DEPLOYED"
    UNKNOWN = "UNKNOWN"


class DeploymentStatus(CamelModel):
    """Deployment state of an API in one environment."""

    environment_id: str
    status: DeploymentState
    version: str | None = None
