"""
Application lifecycle service.

Registers, soft deletes and adds members to applications. Registration
creates an IDMS client in every HIP environment. Deletion removes those
clients and cancels outstanding access requests.

Dependencies: api_hub_applications.boundary.db.CRUD, api_hub_applications.boundary.connectors
System role: Application write use cases
"""

import logging

from api_hub_applications.application.helpers.notifications import notify
from api_hub_applications.application.helpers.use_first_exception import gather_all
from api_hub_applications.application.services.access_requests_service import AccessRequestsService
from api_hub_applications.application.services.applications_event_service import ApplicationsEventService
from api_hub_applications.application.services.applications_search_service import ApplicationsSearchService
from api_hub_applications.boundary.connectors.email_connector import EmailConnector
from api_hub_applications.boundary.connectors.idms_connector import IdmsConnector
from api_hub_applications.boundary.db.CRUD.application_crud import ApplicationCRUD
from api_hub_applications.boundary.db.CRUD.team_crud import TeamCRUD
from api_hub_applications.configs.hip_environments import HipEnvironment, HipEnvironments
from api_hub_applications.core.exceptions import IdmsException, IdmsIssue, TeamMemberExistsException
from api_hub_applications.models.application import Application, Credential, NewApplication
from api_hub_applications.models.application_lenses import (
    add_team_member,
    assert_team_member,
    has_team_member,
    set_credentials,
    set_deleted,
    set_team_members,
    set_team_name,
    update_last_updated,
)
from api_hub_applications.models.common import TeamMember, utc_now
from api_hub_applications.models.idms import Client

logger = logging.getLogger(__name__)


class ApplicationsLifecycleService:
    """Application registration, deletion and membership."""

    def __init__(
        self,
        repository: ApplicationCRUD,
        search_service: ApplicationsSearchService,
        teams_repository: TeamCRUD,
        access_requests_service: AccessRequestsService,
        idms: IdmsConnector,
        email: EmailConnector,
        event_service: ApplicationsEventService,
        hip_environments: HipEnvironments,
        clock=utc_now,
    ) -> None:
        self.repository = repository
        self.search_service = search_service
        self.teams_repository = teams_repository
        self.access_requests_service = access_requests_service
        self.idms = idms
        self.email = email
        self.event_service = event_service
        self.hip_environments = hip_environments
        self.clock = clock

    async def register_application(self, new_application: NewApplication, user_email: str) -> Application:
        """
        Register an application and create its credentials.

        The creator always ends up as a team member. The production-like
        credentials are hidden: their secret is never returned or stored.

        Args:
            new_application: Registration request
            user_email: User registering the application, for the audit trail

        Returns:
            Application: The saved application, including secondary secrets

        Raises:
            TeamNotFoundException: If new_application names a team that does not exist
            IdmsException: If a client cannot be created
        """
        now = self.clock()
        application = Application(
            name=new_application.name,
            created=now,
            created_by=new_application.created_by,
            last_updated=now,
            team_id=new_application.team_id,
            team_members=new_application.team_members,
        )
        application = assert_team_member(application, new_application.created_by.email)

        team = None
        if new_application.team_id is not None:
            team = await self.teams_repository.find_by_id(new_application.team_id)

        credentials = await gather_all(
            self._create_credential(environment, application) for environment in self.hip_environments.environments
        )
        saved = await self.repository.insert(set_credentials(application, credentials))
        logger.info(
            "Application registered",
            extra={"application_id": saved.safe_id, "application_name": saved.name},
        )

        if team is not None:
            saved = set_team_name(set_team_members(saved, team.team_members), team.name)

        await notify(self.email.send_add_team_member_email(saved), "add team member")
        await notify(self.email.send_application_created_email_to_creator(saved), "application created")
        await self.event_service.register(saved, user_email, now)

        return saved

    async def _create_credential(self, environment: HipEnvironment, application: Application) -> Credential:
        response = await self.idms.create_client(environment, Client.for_application_name(application.name))
        return response.as_new_credential(self.clock(), environment.id, hidden=environment.is_production_like)

    async def delete(self, application_id: str, user_email: str) -> None:
        """
        Soft delete an application.

        Every IDMS client is deleted first. A client IDMS no longer knows
        about is treated as already deleted.

        Args:
            application_id: Application id
            user_email: User deleting the application

        Raises:
            ApplicationNotFoundException: If no live application has this id
            IdmsException: If a client cannot be deleted
        """
        application = await self.search_service.find_by_id(application_id)

        await gather_all(self._delete_client(credential) for credential in application.credentials)

        await self.access_requests_service.cancel_access_requests(application_id, None, user_email)

        now = self.clock()
        stored = await self.repository.find_by_id(application_id)
        deleted = set_deleted(update_last_updated(stored, now), now, user_email)
        await self.repository.update(deleted)
        logger.info("Application deleted", extra={"application_id": application_id, "deleted_by": user_email})

        await notify(
            self.email.send_application_deleted_email_to_current_user(application, user_email),
            "application deleted",
        )
        await notify(self.email.send_application_deleted_email_to_team(application, user_email), "application deleted")
        await self.event_service.delete(deleted, user_email, now)

    async def _delete_client(self, credential: Credential) -> None:
        environment = self.hip_environments.for_id(credential.environment_id)
        try:
            await self.idms.delete_client(environment, credential.client_id)
        except IdmsException as e:
            if e.issue != IdmsIssue.CLIENT_NOT_FOUND:
                raise
            logger.info(
                "Client already deleted",
                extra={"environment_id": environment.id, "client_id": credential.client_id},
            )

    async def add_team_member(self, application_id: str, team_member: TeamMember) -> None:
        """
        Add a member to an application.

        Raises:
            ApplicationNotFoundException: If no live application has this id
            TeamMemberExistsException: If the email is already a member
        """
        application = await self.repository.find_by_id(application_id)
        if has_team_member(application, team_member.email):
            logger.warning(
                "Team member already exists",
                extra={"application_id": application_id},
            )
            raise TeamMemberExistsException.for_id(application_id)

        updated = update_last_updated(add_team_member(application, team_member.email), self.clock())
        await self.repository.update(updated)

        await notify(
            self.email.send_add_team_member_email(set_team_members(updated, [team_member])),
            "add team member",
        )
