"""
Teams service.

Creates teams and manages their membership and name. Team names are
unique regardless of case; the repository enforces this.

Dependencies: api_hub_applications.boundary.db.CRUD.team_crud
System role: Team use cases
"""

import logging

from api_hub_applications.application.helpers.notifications import notify
from api_hub_applications.application.services.teams_event_service import TeamsEventService
from api_hub_applications.boundary.connectors.email_connector import EmailConnector
from api_hub_applications.boundary.db.CRUD.team_crud import TeamCRUD
from api_hub_applications.core.exceptions import (
    LastTeamMemberException,
    TeamMemberDoesNotExistException,
    TeamMemberExistsException,
    TeamNotFoundException,
)
from api_hub_applications.models.common import utc_now
from api_hub_applications.models.team import (
    NewTeam,
    RenameTeamRequest,
    Team,
    TeamMemberRequest,
    add_team_member,
    has_team_member,
    remove_team_member,
    set_name,
)

logger = logging.getLogger(__name__)


class TeamsService:
    """Team creation, lookup and membership."""

    def __init__(
        self,
        repository: TeamCRUD,
        email: EmailConnector,
        event_service: TeamsEventService,
        clock=utc_now,
    ) -> None:
        """
        Initialize teams service.

        Args:
            repository: Team persistence
            email: Email connector for membership notifications
            event_service: Team audit events
            clock: Source of the current time
        """
        self.repository = repository
        self.email = email
        self.event_service = event_service
        self.clock = clock

    async def create(self, new_team: NewTeam, user_email: str) -> Team:
        """
        Create a team.

        Raises:
            TeamNameNotUniqueException: If a team already has this name, ignoring case
        """
        team = await self.repository.insert(new_team.to_team(self.clock()))
        logger.info("Team created", extra={"team_id": team.safe_id, "team_name": team.name})

        await notify(self.email.send_team_member_added_email_to_team_members(team.team_members, team), "team member added")
        await self.event_service.create(team, user_email)

        return team

    async def find_all(self, team_member: str | None = None, name: str | None = None) -> list[Team]:
        return await self.repository.find_all(team_member, name)

    async def find_by_id(self, team_id: str) -> Team:
        return await self.repository.find_by_id(team_id)

    async def find_by_name(self, name: str) -> Team:
        team = await self.repository.find_by_name(name)
        if team is None:
            logger.warning("Team not found", extra={"team_name": name})
            raise TeamNotFoundException.for_name(name)
        return team

    async def add_team_member(self, team_id: str, request: TeamMemberRequest, user_email: str) -> None:
        """
        Add a member to a team.

        Raises:
            TeamNotFoundException: If no team has this id
            TeamMemberExistsException: If the email is already a member
        """
        team = await self.repository.find_by_id(team_id)
        if has_team_member(team, request.email):
            logger.warning("Team member already exists", extra={"team_id": team_id})
            raise TeamMemberExistsException.for_id(team_id)

        updated = add_team_member(team, request.email)
        await self.repository.update(updated)

        await notify(
            self.email.send_team_member_added_email_to_team_members([request.to_team_member()], updated),
            "team member added",
        )
        await self.event_service.add_member(updated, user_email, request.email)

    async def remove_team_member(self, team_id: str, email: str, user_email: str) -> None:
        """
        Remove a member from a team.

        Raises:
            TeamNotFoundException: If no team has this id
            TeamMemberDoesNotExistException: If the email is not a member
            LastTeamMemberException: If the email is the team's only member
        """
        team = await self.repository.find_by_id(team_id)
        if not has_team_member(team, email):
            logger.warning("Team member does not exist", extra={"team_id": team_id})
            raise TeamMemberDoesNotExistException.for_id(team_id)

        if len(team.team_members) == 1:
            logger.warning("Cannot remove the last team member", extra={"team_id": team_id})
            raise LastTeamMemberException.for_id(team_id)

        updated = remove_team_member(team, email)
        await self.repository.update(updated)

        await notify(self.email.send_remove_team_member_from_team_email(email, updated), "team member removed")
        await self.event_service.remove_member(updated, user_email, email)

    async def rename_team(self, team_id: str, request: RenameTeamRequest, user_email: str) -> None:
        """
        Rename a team.

        Raises:
            TeamNotFoundException: If no team has this id
            TeamNameNotUniqueException: If another team already has the new name
        """
        team = await self.repository.find_by_id(team_id)
        renamed = set_name(team, request.name.strip())
        await self.repository.update(renamed)
        logger.info("Team renamed", extra={"team_id": team_id, "team_name": renamed.name})

        await self.event_service.rename(renamed, user_email, team.name)
