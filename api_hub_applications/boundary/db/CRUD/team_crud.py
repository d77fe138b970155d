"""
Team CRUD operations.

Team names are unique case-insensitively, enforced by a unique index with
a strength 2 collation. Duplicate key errors surface as
TeamNameNotUniqueException.

Dependencies: api_hub_applications.boundary.db.CRUD.base_crud, pymongo
System role: Team persistence
"""

import logging
from typing import Any, Mapping

from pymongo import ASCENDING, IndexModel
from pymongo.collation import Collation
from pymongo.errors import DuplicateKeyError

from api_hub_applications.boundary.db.CRUD.base_crud import BaseCRUD, build_and_filter
from api_hub_applications.core.exceptions import (
    NotUpdatedException,
    TeamNameNotUniqueException,
    TeamNotFoundException,
)
from api_hub_applications.models.team import Team

logger = logging.getLogger(__name__)

CASE_INSENSITIVE = Collation(locale="en", strength=2)


class TeamCRUD(BaseCRUD[Team]):
    """CRUD operations for teams."""

    collection_name = "teams"

    def to_document(self, team: Team) -> dict[str, Any]:
        document = super().to_document(team)
        document["teamMembers"] = [{"email": self.crypto.encrypt(member.email)} for member in team.team_members]
        return document

    def from_document(self, document: Mapping[str, Any]) -> Team:
        data = self._with_id(document)
        data["teamMembers"] = [
            {"email": self.crypto.decrypt(member["email"])} for member in data.get("teamMembers", [])
        ]
        return Team.model_validate(data)

    async def ensure_indexes(self) -> None:
        await self.collection.create_indexes(
            [
                IndexModel([("teamMembers.email", ASCENDING)], name="teamMembers-email-index"),
                IndexModel([("name", ASCENDING)], name="name-index", unique=True, collation=CASE_INSENSITIVE),
            ]
        )

    async def insert(self, team: Team) -> Team:
        """
        Insert a team.

        Raises:
            TeamNameNotUniqueException: If the name is already taken
        """
        try:
            return await self.create(team)
        except DuplicateKeyError:
            logger.warning("Duplicate team name", extra={"team_name": team.name})
            raise TeamNameNotUniqueException.for_name(team.name)

    async def find_all(self, team_member: str | None = None, name: str | None = None) -> list[Team]:
        query = build_and_filter(
            {"teamMembers.email": self.crypto.encrypt(team_member)} if team_member else None,
            {"name": name} if name else None,
        )
        return await self.find(query, collation=CASE_INSENSITIVE)

    async def find_by_id(self, team_id: str) -> Team:
        """
        Get a team by id.

        Raises:
            TeamNotFoundException: If no team has this id
        """
        team = await self.get_by_id(team_id)
        if team is None:
            logger.warning("Team not found", extra={"team_id": team_id})
            raise TeamNotFoundException.for_id(team_id)
        return team

    async def find_by_name(self, name: str) -> Team | None:
        document = await self.collection.find_one({"name": name}, collation=CASE_INSENSITIVE)
        return self.from_document(document) if document else None

    async def update(self, team: Team) -> None:
        """
        Persist a team's current state.

        Raises:
            TeamNameNotUniqueException: If a rename clashes with another team
            NotUpdatedException: If no stored team has this id
        """
        try:
            updated = await self.replace(team)
        except DuplicateKeyError:
            logger.warning("Duplicate team name", extra={"team_id": team.id, "team_name": team.name})
            raise TeamNameNotUniqueException.for_name(team.name)
        if not updated:
            raise NotUpdatedException.for_id(team.id)
