"""
Shareable configuration service.

Publishes the HIP environment layout to front ends without URLs or
credentials.

Dependencies: api_hub_applications.configs.hip_environments
System role: Public configuration
"""

from api_hub_applications.configs.hip_environments import HipEnvironments
from api_hub_applications.models.stats import ShareableHipConfig, ShareableHipEnvironment


class ConfigService:
    def __init__(self, hip_environments: HipEnvironments) -> None:
        self.hip_environments = hip_environments

    def hip_environments_config(self) -> ShareableHipConfig:
        return ShareableHipConfig(
            environments=[
                ShareableHipEnvironment(
                    id=environment.id,
                    name=environment.name,
                    rank=environment.rank,
                    is_production_like=environment.is_production_like,
                    promote_to=environment.promote_to,
                    apim_environment_name=environment.apim_environment_name,
                )
                for environment in self.hip_environments.environments
            ],
            production_environment_id=self.hip_environments.production.id,
            deployment_environment_id=self.hip_environments.deploy_to.id,
        )
