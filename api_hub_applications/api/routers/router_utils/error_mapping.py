"""
Exception to HTTP status mapping.

Shared by the per-router error handling decorators so every endpoint
reports domain and downstream failures the same way.

Dependencies: fastapi, api_hub_applications.core.exceptions
System role: HTTP error translation
"""

import logging

from fastapi import HTTPException, status

from api_hub_applications.core.exceptions import (
    UPSTREAM_EXCEPTIONS,
    AccessRequestNotFoundException,
    AccessRequestStatusInvalidException,
    ApimIssue,
    ApiNotFoundException,
    ApplicationCredentialLimitException,
    ApplicationNotFoundException,
    ApplicationsException,
    AutopublishIssue,
    CredentialNotFoundException,
    DecryptionException,
    EventNotFoundException,
    HipEnvironmentNotFound,
    LastTeamMemberException,
    NotUpdatedException,
    TeamMemberDoesNotExistException,
    TeamMemberExistsException,
    TeamNameNotUniqueException,
    TeamNotFoundException,
)

logger = logging.getLogger(__name__)

NOT_FOUND = (
    ApplicationNotFoundException,
    TeamNotFoundException,
    AccessRequestNotFoundException,
    ApiNotFoundException,
    CredentialNotFoundException,
    EventNotFoundException,
    HipEnvironmentNotFound,
    NotUpdatedException,
    TeamMemberDoesNotExistException,
)
CONFLICT = (TeamNameNotUniqueException, LastTeamMemberException)
BAD_REQUEST = (
    TeamMemberExistsException,
    AccessRequestStatusInvalidException,
    ApplicationCredentialLimitException,
    DecryptionException,
)
UPSTREAM_NOT_FOUND = (ApimIssue.SERVICE_NOT_FOUND, AutopublishIssue.DEPLOYMENT_NOT_FOUND)


def status_for(error: ApplicationsException) -> int:
    """HTTP status for a service exception."""
    if isinstance(error, NOT_FOUND) or getattr(error, "issue", None) in UPSTREAM_NOT_FOUND:
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, CONFLICT):
        return status.HTTP_409_CONFLICT
    if isinstance(error, BAD_REQUEST):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, UPSTREAM_EXCEPTIONS):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(error: ApplicationsException, operation: str, **context) -> HTTPException:
    """
    Build the HTTPException for a service exception and log it.

    Client errors are logged at WARNING, everything else at ERROR.
    """
    status_code = status_for(error)
    extra = {key: value for key, value in context.items() if value is not None}
    extra.update({"status_code": status_code, "error": str(error)})
    issue = getattr(error, "issue", None)
    if issue is not None:
        extra["issue"] = issue.value

    if status_code < status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.warning(f"{operation} request rejected", extra=extra)
    else:
        logger.error(f"{operation} request failed", extra=extra)

    return HTTPException(status_code=status_code, detail=error.message)
