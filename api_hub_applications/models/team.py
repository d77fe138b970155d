"""
Team domain models, requests and copy helpers.

Dependencies: pydantic
System role: Team API contracts and persistence shape
"""

from datetime import datetime

from pydantic import Field

from api_hub_applications.models.common import CamelModel, TeamMember


class Team(CamelModel):
    id: str | None = None
    name: str
    created: datetime
    team_members: list[TeamMember] = Field(default_factory=list)

    @property
    def safe_id(self) -> str:
        return self.id or "<none>"


class NewTeam(CamelModel):
    """Request schema for creating a team."""

    name: str = Field(..., min_length=1, max_length=255)
    team_members: list[TeamMember] = Field(default_factory=list)

    def to_team(self, now: datetime) -> Team:
        return Team(name=self.name.strip(), created=now, team_members=self.team_members)


class TeamMemberRequest(CamelModel):
    email: str = Field(..., min_length=3)

    def to_team_member(self) -> TeamMember:
        return TeamMember(email=self.email)


class RenameTeamRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)


def has_team_member(team: Team, email: str) -> bool:
    return any(member.email.lower() == email.lower() for member in team.team_members)


def add_team_member(team: Team, email: str) -> Team:
    return team.model_copy(update={"team_members": [*team.team_members, TeamMember(email=email)]})


def remove_team_member(team: Team, email: str) -> Team:
    return team.model_copy(
        update={"team_members": [member for member in team.team_members if member.email.lower() != email.lower()]}
    )


def set_name(team: Team, name: str) -> Team:
    return team.model_copy(update={"name": name})
