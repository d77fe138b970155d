"""
Users service.

There is no user store: users are the distinct emails found on
applications (including deleted ones) and teams.

Dependencies: api_hub_applications.boundary.db.CRUD
System role: User directory
"""

from api_hub_applications.boundary.db.CRUD.application_crud import ApplicationCRUD
from api_hub_applications.boundary.db.CRUD.team_crud import TeamCRUD
from api_hub_applications.models.common import UserContactDetails


def normalise_email(email: str) -> str | None:
    """Lowercase the domain of an email, or return None when it is not an address."""
    mailbox, separator, domain = email.strip().rpartition("@")
    if not separator or not mailbox or not domain:
        return None
    return f"{mailbox}@{domain.lower()}"


class UsersService:
    def __init__(self, applications_repository: ApplicationCRUD, teams_repository: TeamCRUD) -> None:
        self.applications_repository = applications_repository
        self.teams_repository = teams_repository

    async def find_all(self) -> list[UserContactDetails]:
        applications = await self.applications_repository.find_all(include_deleted=True)
        teams = await self.teams_repository.find_all()

        emails = [
            *(application.created_by.email for application in applications),
            *(member.email for application in applications for member in application.team_members),
            *(member.email for team in teams for member in team.team_members),
        ]
        normalised = {email for email in (normalise_email(raw) for raw in emails) if email}

        ordered = sorted(normalised, key=lambda email: (email.lower(), email))
        return [UserContactDetails(email=email) for email in ordered]
