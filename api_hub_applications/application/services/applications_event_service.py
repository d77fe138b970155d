"""
Application audit events.

Dependencies: api_hub_applications.application.services.events_service
System role: Builds APPLICATION events
"""

from datetime import datetime

from api_hub_applications.application.services.events_service import EventsService
from api_hub_applications.configs.hip_environments import HipEnvironment
from api_hub_applications.models.application import Api, Application, Credential
from api_hub_applications.models.event import EntityType, Event, EventType
from api_hub_applications.models.team import Team


class ApplicationsEventService:
    def __init__(self, events_service: EventsService) -> None:
        self.events_service = events_service

    async def _log(
        self,
        application: Application,
        event_type: EventType,
        user: str,
        timestamp: datetime,
        **parameters,
    ) -> None:
        await self.events_service.log(
            Event.new_event(
                entity_id=application.safe_id,
                entity_type=EntityType.APPLICATION,
                event_type=event_type,
                user=user,
                timestamp=timestamp,
                **parameters,
            )
        )

    async def register(self, application: Application, user: str, timestamp: datetime) -> None:
        await self._log(
            application,
            EventType.REGISTERED,
            user,
            timestamp,
            applicationName=application.name,
            teamId=application.team_id,
            teamName=application.team_name,
        )

    async def delete(self, application: Application, user: str, timestamp: datetime, soft_deleted: bool = True) -> None:
        await self._log(application, EventType.DELETED, user, timestamp, softDeleted=soft_deleted)

    async def add_api(self, application: Application, api: Api, user: str, timestamp: datetime) -> None:
        await self._log(
            application,
            EventType.API_ADDED,
            user,
            timestamp,
            apiId=api.id,
            apiTitle=api.title,
            endpoints=[f"{endpoint.http_method} {endpoint.path}" for endpoint in api.endpoints],
        )

    async def remove_api(self, application: Application, api: Api, user: str, timestamp: datetime) -> None:
        await self._log(application, EventType.API_REMOVED, user, timestamp, apiId=api.id, apiTitle=api.title)

    async def change_team(
        self,
        application: Application,
        new_team: Team,
        old_team: Team | None,
        user: str,
        timestamp: datetime,
    ) -> None:
        await self._log(
            application,
            EventType.TEAM_CHANGED,
            user,
            timestamp,
            newTeamId=new_team.safe_id,
            newTeamName=new_team.name,
            oldTeamId=old_team.safe_id if old_team else None,
            oldTeamName=old_team.name if old_team else None,
        )

    async def create_credential(
        self,
        application: Application,
        credential: Credential,
        user: str,
        timestamp: datetime,
    ) -> None:
        await self._log(
            application,
            EventType.CREDENTIAL_CREATED,
            user,
            timestamp,
            environmentId=credential.environment_id,
            clientId=credential.client_id,
        )

    async def revoke_credential(
        self,
        application: Application,
        environment: HipEnvironment,
        client_id: str,
        user: str,
        timestamp: datetime,
    ) -> None:
        await self._log(
            application,
            EventType.CREDENTIAL_REVOKED,
            user,
            timestamp,
            environmentId=environment.id,
            clientId=client_id,
        )

    async def fix_scopes(self, application: Application, user: str, timestamp: datetime) -> None:
        await self._log(application, EventType.SCOPES_FIXED, user, timestamp)
