"""
Email connector.

Sends templated notifications through the HMRC email service. Each send
resolves its template id from EMAIL_* settings and skips the call when
there is nobody to send to.

Dependencies: httpx
System role: Outbound email notifications
"""

import logging

import httpx

from api_hub_applications.boundary.connectors.base_connector import BaseConnector
from api_hub_applications.configs.services import EmailTemplateSettings
from api_hub_applications.core.exceptions import EmailException
from api_hub_applications.models.access_request import AccessRequest
from api_hub_applications.models.application import Application
from api_hub_applications.models.common import TeamMember
from api_hub_applications.models.integration_catalogue import ApiDetail
from api_hub_applications.models.team import Team

logger = logging.getLogger(__name__)

ACCEPTED_STATUSES = (200, 202)


class EmailConnector(BaseConnector):
    """Templated email sends."""

    service_name = "Email API"

    def __init__(self, client: httpx.AsyncClient, base_url: str, templates: EmailTemplateSettings) -> None:
        super().__init__(client)
        self.url = f"{base_url.rstrip('/')}/hmrc/email"
        self.templates = templates

    def _template(self, name: str) -> str:
        template_id = getattr(self.templates, name)
        if not template_id:
            raise EmailException.missing_config(f"email.{name}")
        return template_id

    async def _send(self, to: list[str], template_name: str, parameters: dict[str, str]) -> None:
        if not to:
            logger.info("No recipients, email not sent", extra={"template": template_name})
            return

        body = {"to": to, "templateId": self._template(template_name), "parameters": parameters}
        response = await self.send("POST", self.url, EmailException.error, json=body)
        if response.status_code not in ACCEPTED_STATUSES:
            logger.warning(
                "Unexpected response from Email API",
                extra={"status_code": response.status_code, "template": template_name},
            )
            raise EmailException.unexpected_response(response.status_code)

    async def send_add_team_member_email(self, application: Application) -> None:
        """Tell everyone but the creator they were added to an application."""
        to = [m.email for m in application.team_members if m.email != application.created_by.email]
        await self._send(
            to,
            "add_team_member_to_application_template_id",
            {"applicationname": application.name, "creatorusername": application.created_by.email},
        )

    async def send_application_deleted_email_to_current_user(self, application: Application, current_user: str) -> None:
        await self._send(
            [current_user],
            "delete_application_email_to_user_template_id",
            {"applicationname": application.name},
        )

    async def send_application_deleted_email_to_team(self, application: Application, current_user: str) -> None:
        to = [m.email for m in application.team_members if m.email != current_user]
        await self._send(to, "delete_application_email_to_team_template_id", {"applicationname": application.name})

    async def send_application_created_email_to_creator(self, application: Application) -> None:
        await self._send(
            [application.created_by.email],
            "application_created_email_to_creator_template_id",
            {"applicationname": application.name},
        )

    async def send_access_approved_email_to_team(self, application: Application, access_request: AccessRequest) -> None:
        await self._send(
            [m.email for m in application.team_members],
            "access_approved_email_to_team_template_id",
            {"applicationname": application.name, "apispecificationname": access_request.api_name},
        )

    async def send_access_rejected_email_to_team(self, application: Application, access_request: AccessRequest) -> None:
        await self._send(
            [m.email for m in application.team_members],
            "access_rejected_email_to_team_template_id",
            {"applicationname": application.name, "apispecificationname": access_request.api_name},
        )

    async def send_access_request_submitted_email_to_requester(
        self,
        application: Application,
        access_request: AccessRequest,
    ) -> None:
        await self._send(
            [access_request.requested_by],
            "access_request_submitted_email_to_requester_template_id",
            {"applicationname": application.name, "apispecificationname": access_request.api_name},
        )

    async def send_new_access_request_email_to_approvers(
        self,
        application: Application,
        access_request: AccessRequest,
    ) -> None:
        approvers = self.templates.approvers_team_email
        if not approvers:
            raise EmailException.missing_config("email.approvers_team_email")
        await self._send(
            [approvers],
            "new_access_request_email_to_approvers_template_id",
            {"applicationname": application.name, "apispecificationname": access_request.api_name},
        )

    async def send_team_member_added_email_to_team_members(self, team_members: list[TeamMember], team: Team) -> None:
        await self._send(
            [m.email for m in team_members],
            "team_member_added_email_to_team_members_template_id",
            {"teamname": team.name},
        )

    async def send_remove_team_member_from_team_email(self, email: str, team: Team) -> None:
        await self._send([email], "remove_team_member_from_team_email_template_id", {"teamname": team.name})

    async def send_application_ownership_changed_email_to_old_team_members(
        self,
        old_team: Team,
        new_team: Team,
        application: Application,
    ) -> None:
        await self._send(
            [m.email for m in old_team.team_members],
            "application_ownership_changed_email_to_old_team_template_id",
            {"applicationname": application.name, "oldteamname": old_team.name, "newteamname": new_team.name},
        )

    async def send_application_ownership_changed_email_to_new_team_members(
        self,
        new_team: Team,
        application: Application,
    ) -> None:
        await self._send(
            [m.email for m in new_team.team_members],
            "application_ownership_changed_email_to_new_team_template_id",
            {"applicationname": application.name, "teamname": new_team.name},
        )

    async def send_api_ownership_changed_email_to_old_team_members(
        self,
        old_team: Team,
        new_team: Team,
        api: ApiDetail,
    ) -> None:
        await self._send(
            [m.email for m in old_team.team_members],
            "api_ownership_changed_email_to_old_team_template_id",
            {"apispecificationname": api.title, "oldteamname": old_team.name, "newteamname": new_team.name},
        )

    async def send_api_ownership_changed_email_to_new_team_members(self, new_team: Team, api: ApiDetail) -> None:
        await self._send(
            [m.email for m in new_team.team_members],
            "api_ownership_changed_email_to_new_team_template_id",
            {"apispecificationname": api.title, "teamname": new_team.name},
        )
