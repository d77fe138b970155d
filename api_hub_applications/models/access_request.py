"""
Access request domain models and schemas.

An access request asks for an application's production credentials to be
granted the scopes of an API's endpoints. Requests start PENDING and are
approved, rejected or cancelled exactly once.

Dependencies: pydantic
System role: Access request API contracts and persistence shape
"""

import enum
from datetime import datetime

from pydantic import Field

from api_hub_applications.models.common import CamelModel


class AccessRequestStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class AccessRequestEndpoint(CamelModel):
    http_method: str
    path: str
    scopes: list[str] = Field(default_factory=list)


class AccessRequestDecision(CamelModel):
    decided: datetime
    decided_by: str
    rejected_reason: str | None = None


class AccessRequestCancelled(CamelModel):
    cancelled: datetime
    cancelled_by: str


class AccessRequest(CamelModel):
    id: str | None = None
    application_id: str
    api_id: str
    api_name: str
    status: AccessRequestStatus
    endpoints: list[AccessRequestEndpoint] = Field(default_factory=list)
    supporting_information: str
    requested: datetime
    requested_by: str
    environment_id: str
    decision: AccessRequestDecision | None = None
    cancelled: AccessRequestCancelled | None = None

    @property
    def scopes(self) -> list[str]:
        """Distinct scopes across all endpoints, in first-seen order."""
        return list(dict.fromkeys(scope for endpoint in self.endpoints for scope in endpoint.scopes))


class AccessRequestApi(CamelModel):
    api_id: str
    api_name: str
    endpoints: list[AccessRequestEndpoint] = Field(default_factory=list)


class AccessRequestRequest(CamelModel):
    """Request schema for creating access requests, one per API."""

    application_id: str
    supporting_information: str
    requested_by: str
    apis: list[AccessRequestApi] = Field(..., min_length=1)
    environment_id: str = "production"

    def to_access_requests(self, now: datetime) -> list[AccessRequest]:
        return [
            AccessRequest(
                application_id=self.application_id,
                api_id=api.api_id,
                api_name=api.api_name,
                status=AccessRequestStatus.PENDING,
                endpoints=api.endpoints,
                supporting_information=self.supporting_information,
                requested=now,
                requested_by=self.requested_by,
                environment_id=self.environment_id,
            )
            for api in self.apis
        ]


class AccessRequestDecisionRequest(CamelModel):
    decided_by: str
    rejected_reason: str | None = None


class AccessRequestCancelRequest(CamelModel):
    cancelled_by: str


def set_status(access_request: AccessRequest, status: AccessRequestStatus) -> AccessRequest:
    return access_request.model_copy(update={"status": status})


def set_decision(
    access_request: AccessRequest,
    decision_request: AccessRequestDecisionRequest,
    now: datetime,
) -> AccessRequest:
    decision = AccessRequestDecision(
        decided=now,
        decided_by=decision_request.decided_by,
        rejected_reason=decision_request.rejected_reason,
    )
    return access_request.model_copy(update={"decision": decision})


def cancel(access_request: AccessRequest, cancelled_by: str, now: datetime) -> AccessRequest:
    cancelled = AccessRequestCancelled(cancelled=now, cancelled_by=cancelled_by)
    return access_request.model_copy(update={"cancelled": cancelled, "status": AccessRequestStatus.CANCELLED})
