"""
Team validation utilities.

Dependencies: api_hub_applications.models.team
System role: Team request validation
"""

from api_hub_applications.models.team import NewTeam, RenameTeamRequest, TeamMemberRequest


class TeamValidationError(ValueError):
    """Raised when team validation fails."""


def _validate_name(name: str) -> None:
    if not name.strip():
        raise TeamValidationError("Team name cannot be empty or whitespace-only")


def _validate_email(email: str) -> None:
    mailbox, separator, domain = email.strip().rpartition("@")
    if not separator or not mailbox or not domain:
        raise TeamValidationError(f"Invalid team member email: {email}")


def validate_new_team(request: NewTeam) -> None:
    """
    Validate a team creation request.

    Raises:
        TeamValidationError: If the name is blank, there are no members or a member is not an email
    """
    _validate_name(request.name)
    if not request.team_members:
        raise TeamValidationError("A team must have at least one member")
    for member in request.team_members:
        _validate_email(member.email)


def validate_team_member(request: TeamMemberRequest) -> None:
    _validate_email(request.email)


def validate_rename(request: RenameTeamRequest) -> None:
    _validate_name(request.name)
