"""
Application credentials service.

Issues and revokes IDMS credentials for an application in one HIP
environment and grants access request scopes to production credentials.

Dependencies: api_hub_applications.boundary.connectors.idms_connector
System role: Credential use cases
"""

import logging

from api_hub_applications.application.helpers.use_first_exception import gather_all
from api_hub_applications.application.services.applications_event_service import ApplicationsEventService
from api_hub_applications.boundary.connectors.idms_connector import IdmsConnector
from api_hub_applications.boundary.db.CRUD.application_crud import ApplicationCRUD
from api_hub_applications.configs.hip_environments import HipEnvironment, HipEnvironments
from api_hub_applications.core.exceptions import (
    ApplicationCredentialLimitException,
    CredentialNotFoundException,
    IdmsException,
    IdmsIssue,
)
from api_hub_applications.models.access_request import AccessRequest
from api_hub_applications.models.application import Credential
from api_hub_applications.models.application_lenses import (
    add_credential,
    credentials_for,
    is_hidden,
    master_credential,
    remove_credential,
    replace_credential,
    update_last_updated,
)
from api_hub_applications.models.common import utc_now
from api_hub_applications.models.idms import Client

logger = logging.getLogger(__name__)

MAX_CREDENTIALS_PER_ENVIRONMENT = 5


class ApplicationsCredentialsService:
    """Per-environment credential management."""

    def __init__(
        self,
        repository: ApplicationCRUD,
        idms: IdmsConnector,
        event_service: ApplicationsEventService,
        hip_environments: HipEnvironments,
        clock=utc_now,
    ) -> None:
        self.repository = repository
        self.idms = idms
        self.event_service = event_service
        self.hip_environments = hip_environments
        self.clock = clock

    async def get_credentials(self, application_id: str, environment: HipEnvironment) -> list[Credential]:
        """
        List an application's credentials in one environment.

        Visible credentials carry their current secret from IDMS. Hidden
        credentials are returned as stored, without a secret.

        Raises:
            ApplicationNotFoundException: If no live application has this id
            IdmsException: If IDMS cannot return a client
        """
        application = await self.repository.find_by_id(application_id)
        return await gather_all(
            self._with_current_secret(environment, credential)
            for credential in credentials_for(application, environment.id)
        )

    async def _with_current_secret(self, environment: HipEnvironment, credential: Credential) -> Credential:
        if is_hidden(credential):
            return credential.without_secret()
        client = await self.idms.fetch_client(environment, credential.client_id)
        return credential.with_secret(client.secret)

    async def add_credential(self, application_id: str, environment: HipEnvironment, user_email: str) -> Credential:
        """
        Issue a new credential.

        In a production-like environment whose master credential is hidden,
        the master's secret is rotated and the master is replaced. Otherwise
        a new client is created with the master's scopes copied over.

        Args:
            application_id: Application id
            environment: Environment to issue the credential in
            user_email: User requesting the credential

        Returns:
            Credential: The new credential, including its secret

        Raises:
            ApplicationNotFoundException: If no live application has this id
            ApplicationCredentialLimitException: If the environment already holds the maximum
            IdmsException: If IDMS rejects any call
        """
        application = await self.repository.find_by_id(application_id)
        if len(credentials_for(application, environment.id)) >= MAX_CREDENTIALS_PER_ENVIRONMENT:
            logger.warning(
                "Credential limit reached",
                extra={"application_id": application_id, "environment_id": environment.id},
            )
            raise ApplicationCredentialLimitException.for_id(application_id, environment.id)

        now = self.clock()
        master = master_credential(application, environment.id)

        if environment.is_production_like and master is not None and is_hidden(master):
            secret = await self.idms.new_secret(environment, master.client_id)
            credential = Credential(
                client_id=master.client_id,
                created=now,
                environment_id=environment.id,
            ).with_secret(secret.secret)
            updated = replace_credential(application, master.client_id, self._stored(environment, credential))
        else:
            response = await self.idms.create_client(environment, Client.for_application_name(application.name))
            credential = response.as_new_credential(now, environment.id)
            if master is not None:
                await self._copy_scopes(environment, master, credential)
            updated = add_credential(application, self._stored(environment, credential))

        await self.repository.update(update_last_updated(updated, now))
        logger.info(
            "Credential added",
            extra={"application_id": application_id, "environment_id": environment.id, "client_id": credential.client_id},
        )
        await self.event_service.create_credential(updated, credential, user_email, now)

        return credential

    @staticmethod
    def _stored(environment: HipEnvironment, credential: Credential) -> Credential:
        if environment.is_production_like:
            return credential.without_secret()
        return credential

    async def _copy_scopes(self, environment: HipEnvironment, source: Credential, target: Credential) -> None:
        scopes = await self.idms.fetch_client_scopes(environment, source.client_id)
        await gather_all(
            self.idms.add_client_scope(environment, target.client_id, scope.client_scope_id) for scope in scopes
        )

    async def delete_credential(
        self,
        application_id: str,
        environment: HipEnvironment,
        client_id: str,
        user_email: str,
    ) -> None:
        """
        Revoke a credential.

        Raises:
            ApplicationNotFoundException: If no live application has this id
            CredentialNotFoundException: If the application has no such credential
            ApplicationCredentialLimitException: If it is the environment's only credential
            IdmsException: If IDMS fails to delete an existing client
        """
        application = await self.repository.find_by_id(application_id)
        credentials = credentials_for(application, environment.id)

        if not any(credential.client_id == client_id for credential in credentials):
            logger.warning(
                "Credential not found",
                extra={"application_id": application_id, "environment_id": environment.id, "client_id": client_id},
            )
            raise CredentialNotFoundException.for_client_id(client_id)

        if len(credentials) == 1:
            logger.warning(
                "Cannot remove the only credential",
                extra={"application_id": application_id, "environment_id": environment.id},
            )
            raise ApplicationCredentialLimitException.for_id(application_id, environment.id)

        try:
            await self.idms.delete_client(environment, client_id)
        except IdmsException as e:
            if e.issue != IdmsIssue.CLIENT_NOT_FOUND:
                raise
            logger.info("Client already deleted", extra={"environment_id": environment.id, "client_id": client_id})

        now = self.clock()
        updated = update_last_updated(remove_credential(application, environment.id, client_id), now)
        await self.repository.update(updated)
        await self.event_service.revoke_credential(updated, environment, client_id, user_email, now)

    async def add_primary_access(self, access_request: AccessRequest) -> None:
        """
        Grant an access request's scopes to every credential in its environment.

        Raises:
            ApplicationNotFoundException: If the requesting application no longer exists
            HipEnvironmentNotFound: If the request names an unknown environment
            IdmsException: If a scope cannot be added
        """
        application = await self.repository.find_by_id(access_request.application_id)
        environment = self.hip_environments.for_id(access_request.environment_id)
        await gather_all(
            self.idms.add_client_scope(environment, credential.client_id, scope)
            for credential in credentials_for(application, environment.id)
            for scope in access_request.scopes
        )
