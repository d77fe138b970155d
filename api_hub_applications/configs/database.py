"""
MongoDB configuration settings.

Connection URI and database name used by the motor client.

Dependencies: pydantic, pydantic_settings
System role: Persistence configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from api_hub_applications.configs.base import BaseSettings


class MongoSettings(BaseSettings):
    """MongoDB connection configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MONGO_",
        case_sensitive=False,
        extra="ignore",
    )

    uri: str = Field(default="mongodb://localhost:27017", description="MongoDB connection URI")
    database: str = Field(default="api-hub-applications", description="MongoDB database name")
    server_selection_timeout_ms: int = Field(
        default=5000,
        description="How long the driver waits for a reachable server",
    )


class CryptoSettings(BaseSettings):
    """Field-level encryption key for sensitive document values."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CRYPTO_",
        case_sensitive=False,
        extra="ignore",
    )

    key: str = Field(
        default="dGhpcyBpcyBub3QgYSByZWFsIGtleSBjaGFuZ2UgbWU=",
        description="Base64 encoded 32 byte AES key",
    )


class EventsSettings(BaseSettings):
    """Audit event logging toggle."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EVENTS_",
        case_sensitive=False,
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Write audit events to the events collection")
