"""
Team audit events.

Dependencies: api_hub_applications.application.services.events_service
System role: Builds TEAM events
"""

from api_hub_applications.application.services.events_service import EventsService
from api_hub_applications.models.common import utc_now
from api_hub_applications.models.event import EntityType, Event, EventType
from api_hub_applications.models.team import Team


class TeamsEventService:
    def __init__(self, events_service: EventsService, clock=utc_now) -> None:
        self.events_service = events_service
        self.clock = clock

    async def _log(self, team: Team, event_type: EventType, user: str, **parameters) -> None:
        await self.events_service.log(
            Event.new_event(
                entity_id=team.safe_id,
                entity_type=EntityType.TEAM,
                event_type=event_type,
                user=user,
                timestamp=self.clock(),
                **parameters,
            )
        )

    async def create(self, team: Team, user: str) -> None:
        await self._log(
            team,
            EventType.CREATED,
            user,
            teamName=team.name,
            teamMembers=[member.email for member in team.team_members],
        )

    async def add_member(self, team: Team, user: str, new_team_member: str) -> None:
        await self._log(team, EventType.MEMBER_ADDED, user, teamMember=new_team_member)

    async def remove_member(self, team: Team, user: str, removed_team_member: str) -> None:
        await self._log(team, EventType.MEMBER_REMOVED, user, teamMember=removed_team_member)

    async def rename(self, team: Team, user: str, old_team_name: str) -> None:
        await self._log(team, EventType.RENAMED, user, oldName=old_team_name, newName=team.name)
