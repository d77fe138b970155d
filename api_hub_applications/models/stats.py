"""
Statistics and shareable configuration schemas.

Dependencies: pydantic
System role: Read-only reporting contracts
"""

from api_hub_applications.models.common import CamelModel


class ApisInProductionStatistic(CamelModel):
    total_apis: int
    apis_in_production: int


class ShareableHipEnvironment(CamelModel):
    """Public view of a HIP environment, without credentials or URLs."""

    id: str
    name: str
    rank: int
    is_production_like: bool
    promote_to: str | None = None
    apim_environment_name: str


class ShareableHipConfig(CamelModel):
    environments: list[ShareableHipEnvironment]
    production_environment_id: str
    deployment_environment_id: str
