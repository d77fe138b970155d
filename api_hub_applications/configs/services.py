"""
Downstream service configuration.

Base URLs, tokens and email template ids for the non-APIM integrations.

Dependencies: pydantic, pydantic_settings
System role: Connector configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from api_hub_applications.configs.base import BaseSettings


class ServicesSettings(BaseSettings):
    """Base URLs and credentials for downstream HTTP services."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SERVICES_",
        case_sensitive=False,
        extra="ignore",
    )

    email_url: str = Field(default="http://localhost:8300", description="Email service base URL")
    integration_catalogue_url: str = Field(
        default="http://localhost:11113",
        description="Integration catalogue base URL",
    )
    integration_catalogue_token: str = Field(
        default="A6A4A3B6-1A9E-4D7C-9D43-9F0F7D9B2C11",
        description="App auth token sent to the integration catalogue",
    )
    autopublish_url: str = Field(default="http://localhost:15022", description="Autopublish base URL")
    internal_auth_url: str = Field(default="http://localhost:8470", description="Internal auth base URL")
    auth_enabled: bool = Field(default=False, description="Require a valid internal-auth token")
    request_timeout_seconds: float = Field(default=30.0, description="Timeout for downstream calls")


class EmailTemplateSettings(BaseSettings):
    """Email template ids keyed by notification kind."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMAIL_",
        case_sensitive=False,
        extra="ignore",
    )

    add_team_member_to_application_template_id: str | None = None
    delete_application_email_to_user_template_id: str | None = None
    delete_application_email_to_team_template_id: str | None = None
    application_created_email_to_creator_template_id: str | None = None
    access_approved_email_to_team_template_id: str | None = None
    access_rejected_email_to_team_template_id: str | None = None
    access_request_submitted_email_to_requester_template_id: str | None = None
    new_access_request_email_to_approvers_template_id: str | None = None
    approvers_team_email: str | None = None
    team_member_added_email_to_team_members_template_id: str | None = None
    remove_team_member_from_team_email_template_id: str | None = None
    application_ownership_changed_email_to_old_team_template_id: str | None = None
    application_ownership_changed_email_to_new_team_template_id: str | None = None
    api_ownership_changed_email_to_old_team_template_id: str | None = None
    api_ownership_changed_email_to_new_team_template_id: str | None = None
