"""
Test suite for ApplicationsSearchService.

System role: Verification of application read use cases
"""

from unittest.mock import AsyncMock

import pytest

from api_hub_applications.application.services.applications_search_service import ApplicationsSearchService
from api_hub_applications.configs.hip_environments import HipEnvironments
from api_hub_applications.core.exceptions import TeamNotFoundException
from api_hub_applications.models.application import Application
from api_hub_applications.models.idms import ClientResponse, ClientScope
from api_hub_applications.models.team import Team


@pytest.fixture
def mock_repository() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_teams_repository() -> AsyncMock:
    repository = AsyncMock()
    repository.find_all.return_value = []
    return repository


@pytest.fixture
def search_service(
    mock_repository: AsyncMock,
    mock_teams_repository: AsyncMock,
    mock_idms: AsyncMock,
    hip_environments: HipEnvironments,
) -> ApplicationsSearchService:
    return ApplicationsSearchService(mock_repository, mock_teams_repository, mock_idms, hip_environments)


class TestFindAll:
    """Test suite for ApplicationsSearchService.find_all."""

    @pytest.mark.asyncio
    async def test_should_sort_by_name_and_redact(
        self,
        search_service: ApplicationsSearchService,
        mock_repository: AsyncMock,
        application: Application,
    ) -> None:
        # Arrange
        leaky = application.model_copy(
            update={
                "name": "Zebra",
                "credentials": [application.credentials[0].model_copy(update={"client_secret": "leaked"})],
            }
        )
        other = application.model_copy(update={"id": "65f2c0ffee0000000000ffff", "name": "Aardvark"})
        mock_repository.find_all.return_value = [leaky, other]

        # Act
        applications = await search_service.find_all()

        # Assert
        assert [a.name for a in applications] == ["Aardvark", "Zebra"]
        assert applications[1].credentials[0].client_secret is None

    @pytest.mark.asyncio
    async def test_team_member_should_see_applications_of_their_teams(
        self,
        search_service: ApplicationsSearchService,
        mock_repository: AsyncMock,
        mock_teams_repository: AsyncMock,
        application: Application,
        team: Team,
    ) -> None:
        # Arrange
        team_owned = application.model_copy(
            update={"id": "65f2c0ffee0000000000ffff", "name": "Team App", "team_id": team.id, "team_members": []}
        )
        mock_repository.find_all.return_value = [application]
        mock_repository.find_by_team_ids.return_value = [team_owned, application]
        mock_teams_repository.find_all.side_effect = [[team], [team]]

        # Act
        applications = await search_service.find_all("jessie@example.com")

        # Assert
        assert [a.id for a in applications] == [application.id, team_owned.id]
        assert applications[1].team_name == "Team Rocket"
        assert applications[1].team_members == team.team_members
        mock_repository.find_by_team_ids.assert_awaited_once_with([team.id], False)

    @pytest.mark.asyncio
    async def test_missing_owning_team_should_raise(
        self,
        search_service: ApplicationsSearchService,
        mock_repository: AsyncMock,
        application: Application,
    ) -> None:
        mock_repository.find_all.return_value = [application.model_copy(update={"team_id": "gone"})]

        with pytest.raises(TeamNotFoundException):
            await search_service.find_all()


class TestFindById:
    @pytest.mark.asyncio
    async def test_enrich_should_fill_secondary_secrets(
        self,
        search_service: ApplicationsSearchService,
        mock_repository: AsyncMock,
        mock_idms: AsyncMock,
        application: Application,
    ) -> None:
        mock_repository.find_by_id.return_value = application
        mock_idms.fetch_client.return_value = ClientResponse(client_id="test-client", secret="fresh-secret-5678")

        found = await search_service.find_by_id(application.id, enrich=True)

        assert found.credentials[1].client_secret == "fresh-secret-5678"
        mock_repository.find_by_id.assert_awaited_once_with(application.id, False)

    @pytest.mark.asyncio
    async def test_without_enrich_should_not_call_idms(
        self,
        search_service: ApplicationsSearchService,
        mock_repository: AsyncMock,
        mock_idms: AsyncMock,
        application: Application,
    ) -> None:
        mock_repository.find_by_id.return_value = application

        await search_service.find_by_id(application.id)

        mock_idms.fetch_client.assert_not_called()


class TestFetchAllScopes:
    @pytest.mark.asyncio
    async def test_should_order_by_environment_rank(
        self,
        search_service: ApplicationsSearchService,
        mock_repository: AsyncMock,
        mock_idms: AsyncMock,
        application: Application,
    ) -> None:
        mock_repository.find_by_id.return_value = application.model_copy(
            update={"credentials": list(reversed(application.credentials))}
        )
        mock_idms.fetch_client_scopes.side_effect = lambda environment, client_id: [
            ClientScope(client_scope_id=f"{environment.id}:scope")
        ]

        scopes = await search_service.fetch_all_scopes(application.id)

        assert [(s.environment_id, s.scopes) for s in scopes] == [
            ("production", ["production:scope"]),
            ("test", ["test:scope"]),
        ]
