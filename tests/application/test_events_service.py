"""
Test suite for EventsService and the per-entity event builders.

System role: Verification of the audit trail
"""

from unittest.mock import AsyncMock

import pytest

from api_hub_applications.application.services.access_requests_event_service import AccessRequestsEventService
from api_hub_applications.application.services.applications_event_service import ApplicationsEventService
from api_hub_applications.application.services.events_service import EventsService
from api_hub_applications.application.services.teams_event_service import TeamsEventService
from api_hub_applications.models.access_request import AccessRequest, AccessRequestDecisionRequest, set_decision
from api_hub_applications.models.application import Application
from api_hub_applications.models.event import EntityType, Event, EventType
from api_hub_applications.models.team import Team


@pytest.fixture
def mock_repository() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def event(now) -> Event:
    return Event.new_event("app-1", EntityType.APPLICATION, EventType.CREATED, "creator@example.com", now)


class TestEventsService:
    """Test suite for EventsService."""

    @pytest.mark.asyncio
    async def test_log_should_insert_when_enabled(self, mock_repository: AsyncMock, event: Event) -> None:
        await EventsService(mock_repository, enabled=True).log(event)

        mock_repository.insert.assert_awaited_once_with(event)

    @pytest.mark.asyncio
    async def test_log_should_do_nothing_when_disabled(self, mock_repository: AsyncMock, event: Event) -> None:
        await EventsService(mock_repository, enabled=False).log(event)

        mock_repository.insert.assert_not_called()

    @pytest.mark.asyncio
    async def test_log_failure_should_be_swallowed(
        self,
        mock_repository: AsyncMock,
        event: Event,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        mock_repository.insert.side_effect = RuntimeError("mongo down")

        await EventsService(mock_repository).log(event)

        assert "Failed to log an event" in caplog.text

    @pytest.mark.asyncio
    async def test_log_many_should_skip_empty_batches(self, mock_repository: AsyncMock) -> None:
        await EventsService(mock_repository).log_many([])

        mock_repository.insert_many.assert_not_called()

    @pytest.mark.asyncio
    async def test_find_by_entity_should_delegate(self, mock_repository: AsyncMock, event: Event) -> None:
        mock_repository.find_by_entity.return_value = [event]

        events = await EventsService(mock_repository).find_by_entity(EntityType.APPLICATION, "app-1")

        assert events == [event]
        mock_repository.find_by_entity.assert_awaited_once_with(EntityType.APPLICATION, "app-1")


class TestEventBuilders:
    """Test suite for the entity specific event services."""

    @pytest.mark.asyncio
    async def test_application_registered_event(self, application: Application, now) -> None:
        events_service = AsyncMock()

        await ApplicationsEventService(events_service).register(application, "creator@example.com", now)

        logged = events_service.log.await_args.args[0]
        assert logged.entity_id == application.id
        assert logged.entity_type == EntityType.APPLICATION
        assert logged.event_type == EventType.REGISTERED
        assert logged.parameters == {"applicationName": "My Application"}

    @pytest.mark.asyncio
    async def test_team_renamed_event(self, team: Team, clock) -> None:
        events_service = AsyncMock()

        await TeamsEventService(events_service, clock).rename(team, "jessie@example.com", "Old Name")

        logged = events_service.log.await_args.args[0]
        assert logged.entity_type == EntityType.TEAM
        assert logged.parameters == {"oldName": "Old Name", "newName": "Team Rocket"}

    @pytest.mark.asyncio
    async def test_rejected_event_should_carry_reason(self, access_request: AccessRequest, now) -> None:
        events_service = AsyncMock()
        rejected = set_decision(
            access_request,
            AccessRequestDecisionRequest(decided_by="approver@example.com", rejected_reason="Not needed"),
            now,
        )

        await AccessRequestsEventService(events_service).reject(rejected, "approver@example.com", now)

        logged = events_service.log.await_args.args[0]
        assert logged.event_type == EventType.REJECTED
        assert logged.entity_id == access_request.application_id
        assert logged.parameters["rejectedReason"] == "Not needed"
        assert logged.parameters["accessRequestId"] == access_request.id

    @pytest.mark.asyncio
    async def test_created_events_should_be_logged_together(self, access_request: AccessRequest, now) -> None:
        events_service = AsyncMock()

        await AccessRequestsEventService(events_service).create([access_request, access_request], "r@example.com", now)

        assert len(events_service.log_many.await_args.args[0]) == 2
