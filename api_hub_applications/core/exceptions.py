"""
Exception hierarchy for the applications service.

Domain errors raised by repositories and services, and connector errors
translated from downstream HTTP status codes. Connector errors carry an
``issue`` so callers can react to specific failures (e.g. client not found).

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

import enum
from typing import Any, Sequence

Context = Sequence[tuple[str, Any]]


def add_context(message: str, context: Context | None = None) -> str:
    """Append key=value context pairs to an error message."""
    if not context:
        return message
    rendered = ", ".join(f"{key}={value}" for key, value in context)
    return f"{message}: {rendered}"


class ApplicationsException(Exception):
    """Base exception for all applications service errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# Domain errors


class ApplicationNotFoundException(ApplicationsException):
    """Raised when an application cannot be found."""

    @classmethod
    def for_id(cls, application_id: str) -> "ApplicationNotFoundException":
        return cls(f"Cannot find application with id {application_id}", {"application_id": application_id})


class TeamNotFoundException(ApplicationsException):
    """Raised when a team cannot be found."""

    @classmethod
    def for_id(cls, team_id: str) -> "TeamNotFoundException":
        return cls(f"Cannot find team with id {team_id}", {"team_id": team_id})

    @classmethod
    def for_name(cls, name: str) -> "TeamNotFoundException":
        return cls(f"Cannot find team with name {name}", {"team_name": name})


class AccessRequestNotFoundException(ApplicationsException):
    """Raised when an access request cannot be found."""

    @classmethod
    def for_id(cls, access_request_id: str | None) -> "AccessRequestNotFoundException":
        access_request_id = access_request_id or "<none>"
        return cls(
            f"Cannot find access request with id {access_request_id}",
            {"access_request_id": access_request_id},
        )


class AccessRequestStatusInvalidException(ApplicationsException):
    """Raised when an access request is not in a state that allows the operation."""

    @classmethod
    def for_access_request(cls, access_request_id: str | None, status: str) -> "AccessRequestStatusInvalidException":
        return cls(
            f"Access request {access_request_id or '<none>'} has invalid status {status}",
            {"access_request_id": access_request_id, "status": status},
        )


class ApiNotFoundException(ApplicationsException):
    """Raised when an API cannot be found in the catalogue or on an application."""

    @classmethod
    def for_id(cls, api_id: str) -> "ApiNotFoundException":
        return cls(f"Cannot find API with Id {api_id}", {"api_id": api_id})

    @classmethod
    def for_publisher_ref(cls, publisher_ref: str) -> "ApiNotFoundException":
        return cls(f"Cannot find API with Publisher Ref {publisher_ref}", {"publisher_ref": publisher_ref})

    @classmethod
    def for_application(cls, application_id: str, api_id: str) -> "ApiNotFoundException":
        return cls(
            f"Cannot find API {api_id} linked to application {application_id}",
            {"application_id": application_id, "api_id": api_id},
        )


class CredentialNotFoundException(ApplicationsException):
    """Raised when an application has no credential with the given client id."""

    @classmethod
    def for_client_id(cls, client_id: str) -> "CredentialNotFoundException":
        return cls(f"Cannot find credential with client id {client_id}", {"client_id": client_id})


class ApplicationCredentialLimitException(ApplicationsException):
    """Raised when adding or removing a credential would break the per-environment limits."""

    @classmethod
    def for_id(cls, application_id: str, environment_id: str) -> "ApplicationCredentialLimitException":
        return cls(
            f"Application {application_id} has reached its {environment_id} credential limit.",
            {"application_id": application_id, "environment_id": environment_id},
        )


class TeamMemberExistsException(ApplicationsException):
    """Raised when adding a team member who is already present."""

    @classmethod
    def for_id(cls, entity_id: str) -> "TeamMemberExistsException":
        return cls(f"Team member already exists on {entity_id}", {"id": entity_id})


class TeamMemberDoesNotExistException(ApplicationsException):
    """Raised when removing a team member who is not present."""

    @classmethod
    def for_id(cls, team_id: str) -> "TeamMemberDoesNotExistException":
        return cls(f"Team member does not exist on team {team_id}", {"team_id": team_id})


class LastTeamMemberException(ApplicationsException):
    """Raised when removing the only remaining member of a team."""

    @classmethod
    def for_id(cls, team_id: str) -> "LastTeamMemberException":
        return cls(f"Cannot remove the last team member from team {team_id}", {"team_id": team_id})


class TeamNameNotUniqueException(ApplicationsException):
    """Raised when a team name clashes, case-insensitively, with an existing team."""

    @classmethod
    def for_name(cls, name: str) -> "TeamNameNotUniqueException":
        return cls(f"Team name {name} is not unique", {"team_name": name})


class NotUpdatedException(ApplicationsException):
    """Raised when a repository update matched no document."""

    @classmethod
    def for_id(cls, entity_id: str | None) -> "NotUpdatedException":
        return cls(f"Entity not updated: id={entity_id or '<none>'}", {"id": entity_id})


class EventNotFoundException(ApplicationsException):
    """Raised when an event cannot be found."""

    @classmethod
    def for_id(cls, event_id: str) -> "EventNotFoundException":
        return cls(f"Cannot find event with id {event_id}", {"event_id": event_id})


class HipEnvironmentNotFound(ApplicationsException):
    """Raised when an environment id is not configured."""

    @classmethod
    def for_id(cls, environment_id: str) -> "HipEnvironmentNotFound":
        return cls(f"Cannot find HIP environment with id {environment_id}", {"environment_id": environment_id})


class DecryptionException(ApplicationsException):
    """Raised when an encrypted value supplied by a caller cannot be decrypted."""


# Connector errors


class IdmsIssue(str, enum.Enum):
    CLIENT_NOT_FOUND = "CLIENT_NOT_FOUND"
    UNEXPECTED_RESPONSE = "UNEXPECTED_RESPONSE"
    CALL_ERROR = "CALL_ERROR"
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"


class IdmsException(ApplicationsException):
    """Raised when a call to IDMS fails."""

    def __init__(self, message: str, issue: IdmsIssue, details: dict[str, Any] | None = None) -> None:
        self.issue = issue
        super().__init__(message, details)

    @classmethod
    def client_not_found(cls, client_id: str) -> "IdmsException":
        return cls(f"Client not found: clientId={client_id}", IdmsIssue.CLIENT_NOT_FOUND)

    @classmethod
    def unexpected_response(cls, status_code: int, context: Context | None = None) -> "IdmsException":
        if status_code in (401, 403):
            return cls(
                add_context(f"Invalid credential response {status_code}", context),
                IdmsIssue.INVALID_CREDENTIAL,
                {"status_code": status_code},
            )
        return cls(
            add_context(f"Unexpected response {status_code} returned from IDMS", context),
            IdmsIssue.UNEXPECTED_RESPONSE,
            {"status_code": status_code},
        )

    @classmethod
    def error(cls, error: Exception, context: Context | None = None) -> "IdmsException":
        return cls(add_context("Error calling IDMS", context), IdmsIssue.CALL_ERROR, {"cause": str(error)})


class ApimIssue(str, enum.Enum):
    UNEXPECTED_RESPONSE = "UNEXPECTED_RESPONSE"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    SERVICE_NOT_FOUND = "SERVICE_NOT_FOUND"
    CALL_ERROR = "CALL_ERROR"
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"


class ApimException(ApplicationsException):
    """Raised when a call to the API Management Platform fails."""

    def __init__(self, message: str, issue: ApimIssue, details: dict[str, Any] | None = None) -> None:
        self.issue = issue
        super().__init__(message, details)

    @classmethod
    def unexpected_response(cls, status_code: int, context: Context | None = None) -> "ApimException":
        if status_code in (401, 403):
            return cls(
                add_context(f"Invalid credential response {status_code}", context),
                ApimIssue.INVALID_CREDENTIAL,
                {"status_code": status_code},
            )
        return cls(
            add_context(f"Unexpected response {status_code} returned from APIM", context),
            ApimIssue.UNEXPECTED_RESPONSE,
            {"status_code": status_code},
        )

    @classmethod
    def invalid_response(cls, errors: Any) -> "ApimException":
        return cls(f"Invalid response from APIM: {errors}", ApimIssue.INVALID_RESPONSE)

    @classmethod
    def service_not_found(cls, service_id: str) -> "ApimException":
        return cls(f"Cannot find service with serviceId: {service_id}", ApimIssue.SERVICE_NOT_FOUND)

    @classmethod
    def error(cls, error: Exception, context: Context | None = None) -> "ApimException":
        return cls(add_context("Error calling APIM", context), ApimIssue.CALL_ERROR, {"cause": str(error)})


class EmailIssue(str, enum.Enum):
    MISSING_CONFIG = "MISSING_CONFIG"
    UNEXPECTED_RESPONSE = "UNEXPECTED_RESPONSE"
    MISSING_RECIPIENT = "MISSING_RECIPIENT"
    CALL_ERROR = "CALL_ERROR"


class EmailException(ApplicationsException):
    """Raised when an email cannot be sent."""

    def __init__(self, message: str, issue: EmailIssue, details: dict[str, Any] | None = None) -> None:
        self.issue = issue
        super().__init__(message, details)

    @classmethod
    def missing_config(cls, config_path: str) -> "EmailException":
        return cls(f"Missing configuration value {config_path}", EmailIssue.MISSING_CONFIG)

    @classmethod
    def unexpected_response(cls, status_code: int) -> "EmailException":
        return cls(
            f"Unexpected response {status_code} returned from Email API",
            EmailIssue.UNEXPECTED_RESPONSE,
            {"status_code": status_code},
        )

    @classmethod
    def missing_recipient(cls) -> "EmailException":
        return cls("No recipients for email.", EmailIssue.MISSING_RECIPIENT)

    @classmethod
    def error(cls, error: Exception) -> "EmailException":
        return cls("Error calling Email API", EmailIssue.CALL_ERROR, {"cause": str(error)})


class IntegrationCatalogueIssue(str, enum.Enum):
    UNEXPECTED_RESPONSE = "UNEXPECTED_RESPONSE"
    CALL_ERROR = "CALL_ERROR"


class IntegrationCatalogueException(ApplicationsException):
    """Raised when a call to the integration catalogue fails."""

    def __init__(
        self,
        message: str,
        issue: IntegrationCatalogueIssue,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.issue = issue
        super().__init__(message, details)

    @classmethod
    def unexpected_response(cls, status_code: int, context: Context | None = None) -> "IntegrationCatalogueException":
        return cls(
            add_context(f"Unexpected response {status_code} returned from Integration Catalogue", context),
            IntegrationCatalogueIssue.UNEXPECTED_RESPONSE,
            {"status_code": status_code},
        )

    @classmethod
    def error(cls, error: Exception, context: Context | None = None) -> "IntegrationCatalogueException":
        return cls(
            add_context("Error calling Integration Catalogue", context),
            IntegrationCatalogueIssue.CALL_ERROR,
            {"cause": str(error)},
        )


class AutopublishIssue(str, enum.Enum):
    DEPLOYMENT_NOT_FOUND = "DEPLOYMENT_NOT_FOUND"
    UNEXPECTED_RESPONSE = "UNEXPECTED_RESPONSE"
    CALL_ERROR = "CALL_ERROR"


class AutopublishException(ApplicationsException):
    """Raised when a call to the autopublish service fails."""

    def __init__(self, message: str, issue: AutopublishIssue, details: dict[str, Any] | None = None) -> None:
        self.issue = issue
        super().__init__(message, details)

    @classmethod
    def deployment_not_found(cls, publisher_reference: str) -> "AutopublishException":
        return cls(
            f"Cannot find a deployment for service {publisher_reference}",
            AutopublishIssue.DEPLOYMENT_NOT_FOUND,
        )

    @classmethod
    def unexpected_response(cls, status_code: int) -> "AutopublishException":
        return cls(
            f"Unexpected response {status_code} returned from auto-publish",
            AutopublishIssue.UNEXPECTED_RESPONSE,
            {"status_code": status_code},
        )

    @classmethod
    def error(cls, error: Exception) -> "AutopublishException":
        return cls("Error calling auto-publish", AutopublishIssue.CALL_ERROR, {"cause": str(error)})


UPSTREAM_EXCEPTIONS = (
    IdmsException,
    ApimException,
    EmailException,
    IntegrationCatalogueException,
    AutopublishException,
)
