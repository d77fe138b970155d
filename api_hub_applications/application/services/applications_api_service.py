"""
Application APIs and ownership service.

Links APIs to applications, keeps credential scopes in step with those
links and moves applications between owning teams.

Dependencies: api_hub_applications.application.helpers.scope_fixer
System role: Application API and team use cases
"""

import logging

from api_hub_applications.application.helpers.notifications import notify
from api_hub_applications.application.helpers.scope_fixer import ScopeFixer
from api_hub_applications.application.services.access_requests_service import AccessRequestsService
from api_hub_applications.application.services.applications_event_service import ApplicationsEventService
from api_hub_applications.application.services.applications_search_service import ApplicationsSearchService
from api_hub_applications.application.services.teams_service import TeamsService
from api_hub_applications.boundary.connectors.email_connector import EmailConnector
from api_hub_applications.boundary.db.CRUD.application_crud import ApplicationCRUD
from api_hub_applications.core.exceptions import ApiNotFoundException
from api_hub_applications.models.application import AddApiRequest
from api_hub_applications.models.application_lenses import (
    add_api,
    find_api,
    remove_api,
    set_team_id,
    update_last_updated,
)
from api_hub_applications.models.common import utc_now

logger = logging.getLogger(__name__)


class ApplicationsApiService:
    """API links and team ownership of applications."""

    def __init__(
        self,
        repository: ApplicationCRUD,
        search_service: ApplicationsSearchService,
        access_requests_service: AccessRequestsService,
        teams_service: TeamsService,
        scope_fixer: ScopeFixer,
        email: EmailConnector,
        event_service: ApplicationsEventService,
        clock=utc_now,
    ) -> None:
        self.repository = repository
        self.search_service = search_service
        self.access_requests_service = access_requests_service
        self.teams_service = teams_service
        self.scope_fixer = scope_fixer
        self.email = email
        self.event_service = event_service
        self.clock = clock

    async def add_api(self, application_id: str, request: AddApiRequest, user_email: str) -> None:
        """
        Link an API to an application, replacing any existing link to it.

        Raises:
            ApplicationNotFoundException: If no live application has this id
            IdmsException: If credential scopes cannot be fixed
        """
        application = await self.repository.find_by_id(application_id)
        api = request.to_api()
        updated = add_api(application, api)

        access_requests = await self.access_requests_service.get_access_requests(application_id=application_id)
        await self.scope_fixer.fix(updated, access_requests)

        now = self.clock()
        updated = update_last_updated(updated, now)
        await self.repository.update(updated)
        logger.info("API added to application", extra={"application_id": application_id, "api_id": api.id})
        await self.event_service.add_api(updated, api, user_email, now)

    async def remove_api(self, application_id: str, api_id: str, user_email: str) -> None:
        """
        Unlink an API and cancel its pending access requests.

        Raises:
            ApplicationNotFoundException: If no live application has this id
            ApiNotFoundException: If the API is not linked to the application
            IdmsException: If credential scopes cannot be fixed
        """
        application = await self.repository.find_by_id(application_id)
        api = find_api(application, api_id)
        if api is None:
            logger.warning("API not linked to application", extra={"application_id": application_id, "api_id": api_id})
            raise ApiNotFoundException.for_application(application_id, api_id)

        updated = remove_api(application, api_id)
        access_requests = await self.access_requests_service.get_access_requests(application_id=application_id)
        await self.scope_fixer.fix(updated, access_requests)
        await self.access_requests_service.cancel_access_requests(application_id, api_id, user_email)

        now = self.clock()
        updated = update_last_updated(updated, now)
        await self.repository.update(updated)
        logger.info("API removed from application", extra={"application_id": application_id, "api_id": api_id})
        await self.event_service.remove_api(updated, api, user_email, now)

    async def change_owning_team(self, application_id: str, team_id: str, user_email: str) -> None:
        """
        Move an application to another team.

        Both teams are told when ownership actually changes.

        Raises:
            ApplicationNotFoundException: If no application has this id
            TeamNotFoundException: If either team does not exist
        """
        application = await self.search_service.find_by_id(application_id, include_deleted=True)
        new_team = await self.teams_service.find_by_id(team_id)
        old_team = None
        if application.team_id == new_team.id:
            old_team = new_team
        elif application.team_id is not None:
            old_team = await self.teams_service.find_by_id(application.team_id)

        stored = await self.repository.find_by_id(application_id, include_deleted=True)
        now = self.clock()
        updated = update_last_updated(set_team_id(stored, team_id), now)
        await self.repository.update(updated)
        logger.info(
            "Application owning team changed",
            extra={"application_id": application_id, "team_id": team_id},
        )

        if old_team is not None and old_team.id != new_team.id:
            await notify(
                self.email.send_application_ownership_changed_email_to_old_team_members(old_team, new_team, application),
                "application ownership changed",
            )
            await notify(
                self.email.send_application_ownership_changed_email_to_new_team_members(new_team, application),
                "application ownership changed",
            )
        await self.event_service.change_team(updated, new_team, old_team, user_email, now)

    async def remove_owning_team(self, application_id: str) -> None:
        application = await self.repository.find_by_id(application_id, include_deleted=True)
        if application.team_id is None:
            return
        await self.repository.update(update_last_updated(set_team_id(application, None), self.clock()))
        logger.info("Application owning team removed", extra={"application_id": application_id})

    async def fix_scopes(self, application_id: str, user_email: str) -> None:
        """
        Reconcile an application's credential scopes on demand.

        Raises:
            ApplicationNotFoundException: If no live application has this id
            IdmsException: If credential scopes cannot be fixed
        """
        application = await self.repository.find_by_id(application_id)
        access_requests = await self.access_requests_service.get_access_requests(application_id=application_id)
        await self.scope_fixer.fix(application, access_requests)
        await self.event_service.fix_scopes(application, user_email, self.clock())
