"""
Test suite for ApplicationsApiService.

System role: Verification of API link and ownership use cases
"""

from unittest.mock import AsyncMock

import pytest

from api_hub_applications.application.services.applications_api_service import ApplicationsApiService
from api_hub_applications.core.exceptions import ApiNotFoundException, IdmsException
from api_hub_applications.models.application import AddApiRequest, Api, Application, Endpoint
from api_hub_applications.models.common import TeamMember
from api_hub_applications.models.team import Team


@pytest.fixture
def mock_repository() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_search_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_access_requests_service() -> AsyncMock:
    service = AsyncMock()
    service.get_access_requests.return_value = []
    return service


@pytest.fixture
def mock_teams_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_scope_fixer() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def api_service(
    mock_repository: AsyncMock,
    mock_search_service: AsyncMock,
    mock_access_requests_service: AsyncMock,
    mock_teams_service: AsyncMock,
    mock_scope_fixer: AsyncMock,
    mock_email: AsyncMock,
    mock_event_service: AsyncMock,
    clock,
) -> ApplicationsApiService:
    return ApplicationsApiService(
        mock_repository,
        mock_search_service,
        mock_access_requests_service,
        mock_teams_service,
        mock_scope_fixer,
        mock_email,
        mock_event_service,
        clock,
    )


@pytest.fixture
def linked(application: Application) -> Application:
    return application.model_copy(update={"apis": [Api(id="api-1", title="Test API")]})


class TestAddApi:
    """Test suite for ApplicationsApiService.add_api."""

    @pytest.mark.asyncio
    async def test_should_replace_existing_link_and_fix_scopes(
        self,
        api_service: ApplicationsApiService,
        mock_repository: AsyncMock,
        mock_scope_fixer: AsyncMock,
        mock_event_service: AsyncMock,
        linked: Application,
        now,
    ) -> None:
        # Arrange
        mock_repository.find_by_id.return_value = linked
        request = AddApiRequest(
            id="api-1",
            title="Test API v2",
            endpoints=[Endpoint(http_method="GET", path="/things")],
        )

        # Act
        await api_service.add_api(linked.id, request, "creator@example.com")

        # Assert
        fixed = mock_scope_fixer.fix.await_args.args[0]
        assert [(api.id, api.title) for api in fixed.apis] == [("api-1", "Test API v2")]
        updated = mock_repository.update.await_args.args[0]
        assert updated.last_updated == now
        mock_event_service.add_api.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_scope_failure_should_not_save(
        self,
        api_service: ApplicationsApiService,
        mock_repository: AsyncMock,
        mock_scope_fixer: AsyncMock,
        application: Application,
    ) -> None:
        mock_repository.find_by_id.return_value = application
        mock_scope_fixer.fix.side_effect = IdmsException.unexpected_response(500)

        with pytest.raises(IdmsException):
            await api_service.add_api(application.id, AddApiRequest(id="api-1", title="Test API"), "creator@example.com")

        mock_repository.update.assert_not_called()


class TestRemoveApi:
    @pytest.mark.asyncio
    async def test_should_unlink_and_cancel_requests(
        self,
        api_service: ApplicationsApiService,
        mock_repository: AsyncMock,
        mock_access_requests_service: AsyncMock,
        linked: Application,
    ) -> None:
        mock_repository.find_by_id.return_value = linked

        await api_service.remove_api(linked.id, "api-1", "creator@example.com")

        assert mock_repository.update.await_args.args[0].apis == []
        mock_access_requests_service.cancel_access_requests.assert_awaited_once_with(
            linked.id, "api-1", "creator@example.com"
        )

    @pytest.mark.asyncio
    async def test_unlinked_api_should_raise(
        self,
        api_service: ApplicationsApiService,
        mock_repository: AsyncMock,
        application: Application,
    ) -> None:
        mock_repository.find_by_id.return_value = application

        with pytest.raises(ApiNotFoundException):
            await api_service.remove_api(application.id, "api-9", "creator@example.com")


class TestChangeOwningTeam:
    """Test suite for ApplicationsApiService.change_owning_team."""

    @pytest.fixture
    def new_team(self, now) -> Team:
        return Team(
            id="65f2c0ffee0000000000abcd",
            name="Team Magma",
            created=now,
            team_members=[TeamMember(email="maxie@example.com")],
        )

    @pytest.mark.asyncio
    async def test_should_email_both_teams_when_owner_changes(
        self,
        api_service: ApplicationsApiService,
        mock_repository: AsyncMock,
        mock_search_service: AsyncMock,
        mock_teams_service: AsyncMock,
        mock_email: AsyncMock,
        mock_event_service: AsyncMock,
        application: Application,
        team: Team,
        new_team: Team,
    ) -> None:
        # Arrange
        owned = application.model_copy(update={"team_id": team.id})
        mock_search_service.find_by_id.return_value = owned
        mock_repository.find_by_id.return_value = owned
        mock_teams_service.find_by_id.side_effect = lambda team_id: {team.id: team, new_team.id: new_team}[team_id]

        # Act
        await api_service.change_owning_team(application.id, new_team.id, "creator@example.com")

        # Assert
        assert mock_repository.update.await_args.args[0].team_id == new_team.id
        mock_email.send_application_ownership_changed_email_to_old_team_members.assert_called_once_with(
            team, new_team, owned
        )
        mock_email.send_application_ownership_changed_email_to_new_team_members.assert_called_once_with(new_team, owned)
        mock_event_service.change_team.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_no_previous_team_should_not_email(
        self,
        api_service: ApplicationsApiService,
        mock_repository: AsyncMock,
        mock_search_service: AsyncMock,
        mock_teams_service: AsyncMock,
        mock_email: AsyncMock,
        application: Application,
        new_team: Team,
    ) -> None:
        mock_search_service.find_by_id.return_value = application
        mock_repository.find_by_id.return_value = application
        mock_teams_service.find_by_id.return_value = new_team

        await api_service.change_owning_team(application.id, new_team.id, "creator@example.com")

        mock_email.send_application_ownership_changed_email_to_old_team_members.assert_not_called()
        mock_email.send_application_ownership_changed_email_to_new_team_members.assert_not_called()

    @pytest.mark.asyncio
    async def test_same_team_should_not_look_up_old_team(
        self,
        api_service: ApplicationsApiService,
        mock_repository: AsyncMock,
        mock_search_service: AsyncMock,
        mock_teams_service: AsyncMock,
        mock_email: AsyncMock,
        mock_event_service: AsyncMock,
        application: Application,
        new_team: Team,
    ) -> None:
        # Arrange
        owned = application.model_copy(update={"team_id": new_team.id})
        mock_search_service.find_by_id.return_value = owned
        mock_repository.find_by_id.return_value = owned
        mock_teams_service.find_by_id.return_value = new_team

        # Act
        await api_service.change_owning_team(application.id, new_team.id, "creator@example.com")

        # Assert
        mock_teams_service.find_by_id.assert_awaited_once_with(new_team.id)
        mock_email.send_application_ownership_changed_email_to_old_team_members.assert_not_called()
        mock_email.send_application_ownership_changed_email_to_new_team_members.assert_not_called()
        assert mock_event_service.change_team.await_args.args[2] is new_team


class TestRemoveOwningTeam:
    @pytest.mark.asyncio
    async def test_should_clear_team_id(
        self,
        api_service: ApplicationsApiService,
        mock_repository: AsyncMock,
        application: Application,
        team: Team,
    ) -> None:
        mock_repository.find_by_id.return_value = application.model_copy(update={"team_id": team.id})

        await api_service.remove_owning_team(application.id)

        assert mock_repository.update.await_args.args[0].team_id is None
        mock_repository.find_by_id.assert_awaited_once_with(application.id, include_deleted=True)

    @pytest.mark.asyncio
    async def test_unowned_application_should_not_be_saved(
        self,
        api_service: ApplicationsApiService,
        mock_repository: AsyncMock,
        application: Application,
    ) -> None:
        mock_repository.find_by_id.return_value = application

        await api_service.remove_owning_team(application.id)

        mock_repository.update.assert_not_called()


class TestFixScopes:
    @pytest.mark.asyncio
    async def test_should_fix_with_access_requests(
        self,
        api_service: ApplicationsApiService,
        mock_repository: AsyncMock,
        mock_access_requests_service: AsyncMock,
        mock_scope_fixer: AsyncMock,
        mock_event_service: AsyncMock,
        application,
        access_request,
    ) -> None:
        mock_repository.find_by_id.return_value = application
        mock_access_requests_service.get_access_requests.return_value = [access_request]

        await api_service.fix_scopes(application.id, "creator@example.com")

        mock_scope_fixer.fix.assert_awaited_once_with(application, [access_request])
        mock_event_service.fix_scopes.assert_awaited_once()
