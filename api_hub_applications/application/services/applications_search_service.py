"""
Application search service.

Reads applications and presents them with their owning team's members and
name. Credentials in production-like environments are always redacted.

Dependencies: api_hub_applications.boundary.db.CRUD, api_hub_applications.boundary.connectors
System role: Application read use cases
"""

import logging

from api_hub_applications.application.helpers.application_enricher import ApplicationEnricher, redact
from api_hub_applications.application.helpers.use_first_exception import gather_all
from api_hub_applications.boundary.connectors.idms_connector import IdmsConnector
from api_hub_applications.boundary.db.CRUD.application_crud import ApplicationCRUD
from api_hub_applications.boundary.db.CRUD.team_crud import TeamCRUD
from api_hub_applications.configs.hip_environments import HipEnvironments
from api_hub_applications.core.exceptions import TeamNotFoundException
from api_hub_applications.models.application import Application, Credential, CredentialScopes
from api_hub_applications.models.application_lenses import set_team_members, set_team_name
from api_hub_applications.models.team import Team

logger = logging.getLogger(__name__)


class ApplicationsSearchService:
    """Application lookups."""

    def __init__(
        self,
        repository: ApplicationCRUD,
        teams_repository: TeamCRUD,
        idms: IdmsConnector,
        hip_environments: HipEnvironments,
    ) -> None:
        """
        Initialize search service.

        Args:
            repository: Application persistence
            teams_repository: Team persistence, used to resolve owning teams
            idms: IDMS connector, used to enrich and read credential scopes
            hip_environments: Configured HIP environments
        """
        self.repository = repository
        self.teams_repository = teams_repository
        self.idms = idms
        self.hip_environments = hip_environments
        self.enricher = ApplicationEnricher(idms, hip_environments)

    async def find_all(self, team_member: str | None = None, include_deleted: bool = False) -> list[Application]:
        """
        List applications, optionally those a user can see.

        A user sees applications naming them directly and applications owned
        by any team they belong to.

        Args:
            team_member: Email of the user, or None for every application
            include_deleted: Include soft deleted applications

        Returns:
            list[Application]: Applications sorted by name

        Raises:
            TeamNotFoundException: If an application's owning team does not exist
        """
        applications = await self.repository.find_all(team_member, include_deleted)

        if team_member is not None:
            member_teams = await self.teams_repository.find_all(team_member=team_member)
            team_ids = [team.id for team in member_teams if team.id]
            if team_ids:
                seen = {application.id for application in applications}
                for application in await self.repository.find_by_team_ids(team_ids, include_deleted):
                    if application.id not in seen:
                        seen.add(application.id)
                        applications.append(application)

        teams = {team.id: team for team in await self.teams_repository.find_all()}
        resolved = [redact(self._with_team(application, teams), self.hip_environments) for application in applications]
        return sorted(resolved, key=lambda application: application.name)

    async def find_all_using_api(self, api_id: str, include_deleted: bool = False) -> list[Application]:
        applications = await self.repository.find_all_using_api(api_id, include_deleted)
        teams = {team.id: team for team in await self.teams_repository.find_all()}
        return [redact(self._with_team(application, teams), self.hip_environments) for application in applications]

    async def find_by_id(
        self,
        application_id: str,
        enrich: bool = False,
        include_deleted: bool = False,
    ) -> Application:
        """
        Get one application.

        Args:
            application_id: Application id
            enrich: Read secondary credential secrets from IDMS
            include_deleted: Allow a soft deleted application to be returned

        Returns:
            Application: The application with its team resolved

        Raises:
            ApplicationNotFoundException: If no matching application exists
            TeamNotFoundException: If the owning team does not exist
        """
        application = await self.repository.find_by_id(application_id, include_deleted)
        if application.team_id is not None:
            team = await self.teams_repository.find_by_id(application.team_id)
            application = self._with_team(application, {team.id: team})

        if enrich:
            application = await self.enricher.enrich(application)

        return redact(application, self.hip_environments)

    async def fetch_all_scopes(self, application_id: str) -> list[CredentialScopes]:
        """
        Read the IDMS scopes of every credential on an application.

        Returns:
            list[CredentialScopes]: Ordered by environment rank, then creation time

        Raises:
            ApplicationNotFoundException: If no matching application exists
            IdmsException: If IDMS cannot return a client's scopes
        """
        application = await self.find_by_id(application_id)
        scopes = await gather_all(self._credential_scopes(credential) for credential in application.credentials)
        return sorted(
            scopes,
            key=lambda scope: (self.hip_environments.for_id(scope.environment_id).rank, scope.created),
        )

    async def _credential_scopes(self, credential: Credential) -> CredentialScopes:
        environment = self.hip_environments.for_id(credential.environment_id)
        client_scopes = await self.idms.fetch_client_scopes(environment, credential.client_id)
        return CredentialScopes(
            environment_id=credential.environment_id,
            client_id=credential.client_id,
            created=credential.created,
            scopes=[scope.client_scope_id for scope in client_scopes],
        )

    @staticmethod
    def _with_team(application: Application, teams: dict[str | None, Team]) -> Application:
        if application.team_id is None:
            return application

        team = teams.get(application.team_id)
        if team is None:
            logger.warning(
                "Owning team not found",
                extra={"application_id": application.safe_id, "team_id": application.team_id},
            )
            raise TeamNotFoundException.for_id(application.team_id)

        return set_team_name(set_team_members(application, team.team_members), team.name)
