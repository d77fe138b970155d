"""
API audit events.

Dependencies: api_hub_applications.application.services.events_service
System role: Builds API events
"""

from datetime import datetime

from api_hub_applications.application.services.events_service import EventsService
from api_hub_applications.configs.hip_environments import HipEnvironment
from api_hub_applications.models.apim import RedeploymentRequest, SuccessfulDeploymentsResponse
from api_hub_applications.models.event import EntityType, Event, EventType
from api_hub_applications.models.team import Team


class ApiEventService:
    def __init__(self, events_service: EventsService) -> None:
        self.events_service = events_service

    async def _log(self, api_id: str, event_type: EventType, user: str, timestamp: datetime, **parameters) -> None:
        await self.events_service.log(
            Event.new_event(
                entity_id=api_id,
                entity_type=EntityType.API,
                event_type=event_type,
                user=user,
                timestamp=timestamp,
                **parameters,
            )
        )

    async def update(
        self,
        api_id: str,
        environment: HipEnvironment,
        oas_version: str,
        request: RedeploymentRequest,
        response: SuccessfulDeploymentsResponse,
        user: str,
        timestamp: datetime,
    ) -> None:
        await self._log(
            api_id,
            EventType.UPDATED,
            user,
            timestamp,
            environmentId=environment.id,
            oasVersion=oas_version,
            egress=request.egress,
            status=request.status,
            deploymentVersion=response.version,
            mergeRequestIid=response.merge_request_iid,
        )

    async def promote(
        self,
        api_id: str,
        from_environment: HipEnvironment,
        to_environment: HipEnvironment,
        oas_version: str,
        egress: str,
        response: SuccessfulDeploymentsResponse,
        user: str,
        timestamp: datetime,
    ) -> None:
        await self._log(
            api_id,
            EventType.PROMOTED,
            user,
            timestamp,
            fromEnvironmentId=from_environment.id,
            toEnvironmentId=to_environment.id,
            oasVersion=oas_version,
            egress=egress,
            deploymentVersion=response.version,
            mergeRequestIid=response.merge_request_iid,
        )

    async def change_team(
        self,
        api_id: str,
        new_team: Team,
        old_team: Team | None,
        user: str,
        timestamp: datetime,
    ) -> None:
        await self._log(
            api_id,
            EventType.TEAM_CHANGED,
            user,
            timestamp,
            newTeamId=new_team.safe_id,
            newTeamName=new_team.name,
            oldTeamId=old_team.safe_id if old_team else None,
            oldTeamName=old_team.name if old_team else None,
        )
