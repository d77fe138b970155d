"""
HIP environment configuration.

Declares the deployment environments (production, test, ...) the service
talks to and validates their relationships when loaded.

Dependencies: pydantic, pydantic_settings
System role: Per-environment connection and promotion configuration
"""

import re
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_settings import SettingsConfigDict

from api_hub_applications.configs.base import BaseSettings
from api_hub_applications.core.exceptions import HipEnvironmentNotFound

ENVIRONMENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9\-_.~]+$")


class HipEnvironment(BaseModel):
    """A named deployment environment with its own APIM base URL and credentials."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    name: str
    rank: int
    is_production_like: bool = False
    apim_url: str
    client_id: str
    secret: str
    use_proxy: bool = False
    api_key: str | None = None
    promote_to: str | None = None
    apim_environment_name: str


def _default_environments() -> list[HipEnvironment]:
    return [
        HipEnvironment(
            id="production",
            name="Production",
            rank=1,
            is_production_like=True,
            apim_url="http://localhost:15027/apim-proxy/api-hub-apim-stubs",
            client_id="apim-stub-client-id",
            secret="apim-stub-secret",
            apim_environment_name="production",
        ),
        HipEnvironment(
            id="test",
            name="Test",
            rank=2,
            is_production_like=False,
            apim_url="http://localhost:15027/apim-proxy/api-hub-apim-stubs",
            client_id="apim-stub-client-id",
            secret="apim-stub-secret",
            promote_to="production",
            apim_environment_name="test",
        ),
    ]


class HipEnvironmentsSettings(BaseSettings):
    """Raw HIP environment settings, loaded from HIP_* variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="HIP_",
        case_sensitive=False,
        extra="ignore",
    )

    environments: list[HipEnvironment] = Field(
        default_factory=_default_environments,
        description="JSON list of HIP environments",
    )
    production_environment: str = Field(default="production")
    deployment_environment: str = Field(default="test")
    validation_environment: str = Field(default="production")


class HipEnvironments:
    """
    Validated view over the configured HIP environments.

    Raises ValueError on construction when the configuration is inconsistent.
    """

    def __init__(
        self,
        environments: list[HipEnvironment],
        production_environment: str,
        deployment_environment: str,
        validation_environment: str,
    ) -> None:
        self.environments = sorted(environments, key=lambda environment: environment.rank)
        self._by_id = {environment.id: environment for environment in self.environments}
        self._production_id = production_environment
        self._deployment_id = deployment_environment
        self._validation_id = validation_environment
        self._validate()

    @classmethod
    def from_settings(cls, settings: HipEnvironmentsSettings) -> "HipEnvironments":
        return cls(
            environments=settings.environments,
            production_environment=settings.production_environment,
            deployment_environment=settings.deployment_environment,
            validation_environment=settings.validation_environment,
        )

    @property
    def production(self) -> HipEnvironment:
        return self._by_id[self._production_id]

    @property
    def deploy_to(self) -> HipEnvironment:
        return self._by_id[self._deployment_id]

    @property
    def validate_in(self) -> HipEnvironment:
        return self._by_id[self._validation_id]

    def for_id(self, environment_id: str) -> HipEnvironment:
        """Return the environment with this id, raising HipEnvironmentNotFound otherwise."""
        environment = self._by_id.get(environment_id)
        if environment is None:
            raise HipEnvironmentNotFound.for_id(environment_id)
        return environment

    def for_url_path_parameter(self, environment_id: str) -> HipEnvironment | None:
        return self._by_id.get(environment_id)

    def is_production(self, environment: HipEnvironment) -> bool:
        return environment.id == self._production_id

    def _validate(self) -> None:
        if not self.environments:
            raise ValueError("At least one HIP environment must be configured")

        ranks = [environment.rank for environment in self.environments]
        if ranks != list(range(1, len(ranks) + 1)):
            raise ValueError(f"HIP environment ranks must be contiguous from 1, found {ranks}")

        ids = [environment.id for environment in self.environments]
        if len(set(ids)) != len(ids):
            raise ValueError(f"HIP environment ids must be unique, found {ids}")

        for environment in self.environments:
            if not ENVIRONMENT_ID_PATTERN.match(environment.id):
                raise ValueError(f"Invalid HIP environment id: {environment.id}")

            parsed = urlparse(environment.apim_url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ValueError(
                    f"Invalid apimUrl for HIP environment {environment.id}: {environment.apim_url}"
                )

            if environment.use_proxy and not environment.api_key:
                raise ValueError(f"HIP environment {environment.id} uses the proxy but has no apiKey")

        for name, environment_id in (
            ("production", self._production_id),
            ("deployment", self._deployment_id),
            ("validation", self._validation_id),
        ):
            if environment_id not in self._by_id:
                raise ValueError(f"The {name} HIP environment {environment_id} is not configured")

        production = self.production
        if not production.is_production_like:
            raise ValueError("The production HIP environment must be production-like")
        if production.promote_to is not None:
            raise ValueError("The production HIP environment cannot promote to another environment")

        self._validate_promotion()

    def _validate_promotion(self) -> None:
        targets = [environment.promote_to for environment in self.environments if environment.promote_to]
        if len(set(targets)) != len(targets):
            raise ValueError("HIP environments cannot share a promoteTo target")

        for environment in self.environments:
            if environment.promote_to is None:
                continue
            if environment.promote_to not in self._by_id:
                raise ValueError(
                    f"HIP environment {environment.id} promotes to unknown environment {environment.promote_to}"
                )

            visited = {environment.id}
            current = environment
            while current.promote_to is not None:
                if current.promote_to in visited:
                    raise ValueError(f"HIP environment promotion cycle detected at {environment.id}")
                visited.add(current.promote_to)
                current = self._by_id[current.promote_to]
