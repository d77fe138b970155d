"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from api_hub_applications.configs.base import BaseSettings
from api_hub_applications.configs.database import CryptoSettings, EventsSettings, MongoSettings
from api_hub_applications.configs.hip_environments import HipEnvironments, HipEnvironmentsSettings
from api_hub_applications.configs.services import EmailTemplateSettings, ServicesSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    mongo: MongoSettings = MongoSettings()
    crypto: CryptoSettings = CryptoSettings()
    events: EventsSettings = EventsSettings()
    services: ServicesSettings = ServicesSettings()
    email_templates: EmailTemplateSettings = EmailTemplateSettings()
    hip: HipEnvironmentsSettings = HipEnvironmentsSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are read once and cached.

    Returns:
        Settings: Application settings instance
    """
    return Settings()


@lru_cache
def get_hip_environments() -> HipEnvironments:
    """
    Get the validated HIP environments.

    Returns:
        HipEnvironments: Environments built from HIP_* settings

    Raises:
        ValueError: If the environment configuration is inconsistent
    """
    return HipEnvironments.from_settings(get_settings().hip)
