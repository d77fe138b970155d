"""
Application enrichment and redaction.

Enrichment reads secondary (non production-like) credential secrets back
from IDMS. Credentials in production-like environments never expose a
secret.

Dependencies: api_hub_applications.boundary.connectors.idms_connector
System role: Public view of an application's credentials
"""

import asyncio
import logging

from api_hub_applications.boundary.connectors.idms_connector import IdmsConnector
from api_hub_applications.configs.hip_environments import HipEnvironments
from api_hub_applications.core.exceptions import IdmsException
from api_hub_applications.models.application import Application, Credential
from api_hub_applications.models.application_lenses import add_issue, set_credentials

logger = logging.getLogger(__name__)

SECONDARY_CREDENTIAL_NOT_FOUND = "Secondary credential not found."


def redact(application: Application, hip_environments: HipEnvironments) -> Application:
    """Remove secrets from credentials held in production-like environments."""
    production_like = {environment.id for environment in hip_environments.environments if environment.is_production_like}
    return set_credentials(
        application,
        [
            credential.without_secret() if credential.environment_id in production_like else credential
            for credential in application.credentials
        ],
    )


class ApplicationEnricher:
    """Reads secondary credential secrets from IDMS."""

    def __init__(self, idms: IdmsConnector, hip_environments: HipEnvironments) -> None:
        self.idms = idms
        self.hip_environments = hip_environments

    async def _fetch(self, credential: Credential) -> Credential:
        environment = self.hip_environments.for_id(credential.environment_id)
        if environment.is_production_like:
            return credential
        client = await self.idms.fetch_client(environment, credential.client_id)
        return credential.with_secret(client.secret)

    async def enrich(self, application: Application) -> Application:
        """
        Fill in secondary credential secrets.

        A credential IDMS cannot return is kept as stored and recorded as an
        issue on the application. Any other failure propagates.

        Args:
            application: Application as read from the repository

        Returns:
            Application: Copy with secrets filled in and issues added

        Raises:
            Exception: Non-IDMS failures while fetching clients
        """
        results = await asyncio.gather(
            *(self._fetch(credential) for credential in application.credentials),
            return_exceptions=True,
        )

        credentials: list[Credential] = []
        issues: list[str] = []
        for credential, result in zip(application.credentials, results):
            if isinstance(result, IdmsException):
                logger.warning(
                    "Unable to fetch secondary credential",
                    extra={
                        "application_id": application.safe_id,
                        "client_id": credential.client_id,
                        "error": result.message,
                    },
                )
                credentials.append(credential)
                issues.append(f"{SECONDARY_CREDENTIAL_NOT_FOUND} {result.message}")
            elif isinstance(result, BaseException):
                raise result
            else:
                credentials.append(result)

        enriched = set_credentials(application, credentials)
        for issue in issues:
            enriched = add_issue(enriched, issue)
        return enriched
