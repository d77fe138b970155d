"""
IDMS wire models.

Dependencies: pydantic
System role: Identity Management Service request/response contracts
"""

from datetime import datetime

from api_hub_applications.models.application import Credential
from api_hub_applications.models.common import CamelModel


class Client(CamelModel):
    application_name: str
    description: str

    @classmethod
    def for_application_name(cls, name: str) -> "Client":
        return cls(application_name=name, description=name)


class ClientResponse(CamelModel):
    client_id: str
    secret: str

    def as_new_credential(self, now: datetime, environment_id: str, hidden: bool = False) -> Credential:
        """Credential for a freshly created client. Hidden credentials keep no trace of the secret."""
        if hidden:
            return Credential(client_id=self.client_id, created=now, environment_id=environment_id)
        return Credential(
            client_id=self.client_id,
            created=now,
            client_secret=self.secret,
            secret_fragment=self.secret[-4:],
            environment_id=environment_id,
        )


class ClientScope(CamelModel):
    client_scope_id: str
