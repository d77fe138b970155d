"""
Copy-with-modification helpers for Application.

Each function returns a new Application and leaves its argument untouched.

Dependencies: api_hub_applications.models.application
System role: Pure application state transitions
"""

from datetime import datetime

from api_hub_applications.models.application import Api, Application, Credential, Deleted
from api_hub_applications.models.common import TeamMember


def set_team_id(application: Application, team_id: str | None) -> Application:
    return application.model_copy(update={"team_id": team_id})


def set_team_name(application: Application, team_name: str | None) -> Application:
    return application.model_copy(update={"team_name": team_name})


def set_team_members(application: Application, team_members: list[TeamMember]) -> Application:
    return application.model_copy(update={"team_members": list(team_members)})


def has_team_member(application: Application, email: str) -> bool:
    return any(member.email.lower() == email.lower() for member in application.team_members)


def add_team_member(application: Application, email: str) -> Application:
    return set_team_members(application, [*application.team_members, TeamMember(email=email)])


def assert_team_member(application: Application, email: str) -> Application:
    """Ensure email is a team member, adding it when missing."""
    if has_team_member(application, email):
        return application
    return add_team_member(application, email)


def set_credentials(application: Application, credentials: list[Credential]) -> Application:
    return application.model_copy(update={"credentials": list(credentials)})


def credentials_for(application: Application, environment_id: str) -> list[Credential]:
    return [credential for credential in application.credentials if credential.environment_id == environment_id]


def master_credential(application: Application, environment_id: str) -> Credential | None:
    """The most recently created credential in an environment."""
    credentials = credentials_for(application, environment_id)
    if not credentials:
        return None
    return max(credentials, key=lambda credential: credential.created)


def is_hidden(credential: Credential) -> bool:
    """A hidden credential was issued without ever exposing its secret."""
    return credential.secret_fragment is None


def add_credential(application: Application, credential: Credential) -> Application:
    return set_credentials(application, [*application.credentials, credential])


def replace_credential(application: Application, client_id: str, credential: Credential) -> Application:
    return set_credentials(
        application,
        [credential if existing.client_id == client_id else existing for existing in application.credentials],
    )


def remove_credential(application: Application, environment_id: str, client_id: str) -> Application:
    return set_credentials(
        application,
        [
            credential
            for credential in application.credentials
            if not (credential.environment_id == environment_id and credential.client_id == client_id)
        ],
    )


def add_issue(application: Application, issue: str) -> Application:
    return application.model_copy(update={"issues": [*application.issues, issue]})


def find_api(application: Application, api_id: str) -> Api | None:
    return next((api for api in application.apis if api.id == api_id), None)


def add_api(application: Application, api: Api) -> Application:
    """Add an API, replacing any existing API with the same id."""
    apis = [existing for existing in application.apis if existing.id != api.id]
    return application.model_copy(update={"apis": [*apis, api]})


def remove_api(application: Application, api_id: str) -> Application:
    return application.model_copy(update={"apis": [api for api in application.apis if api.id != api_id]})


def set_deleted(application: Application, deleted: datetime, deleted_by: str) -> Application:
    return application.model_copy(update={"deleted": Deleted(deleted=deleted, deleted_by=deleted_by)})


def update_last_updated(application: Application, now: datetime) -> Application:
    return application.model_copy(update={"last_updated": now})
