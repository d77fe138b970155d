"""
Application validation utilities.

Business logic validation not covered by Pydantic models.

Dependencies: api_hub_applications.models.application
System role: Application request validation
"""

from api_hub_applications.models.application import AddApiRequest, NewApplication


class ApplicationValidationError(ValueError):
    """Raised when application validation fails."""


def validate_email(email: str, field: str) -> None:
    mailbox, separator, domain = email.strip().rpartition("@")
    if not separator or not mailbox or not domain:
        raise ApplicationValidationError(f"{field} must be an email address")


def validate_new_application(request: NewApplication) -> None:
    """
    Validate an application registration request.

    Raises:
        ApplicationValidationError: If business validation fails
    """
    if not request.name.strip():
        raise ApplicationValidationError("Application name cannot be empty or whitespace-only")

    validate_email(request.created_by.email, "createdBy.email")
    for member in request.team_members:
        validate_email(member.email, "teamMembers.email")


def validate_add_api(request: AddApiRequest) -> None:
    if not request.id.strip():
        raise ApplicationValidationError("API id cannot be empty")
    if not request.title.strip():
        raise ApplicationValidationError("API title cannot be empty")
