"""
Deployment validation utilities.

Dependencies: api_hub_applications.models.apim
System role: Deployment request validation
"""

from api_hub_applications.models.apim import DeploymentsRequest, PromotionRequest


class DeploymentValidationError(ValueError):
    """Raised when deployment validation fails."""


def validate_oas(oas: str) -> None:
    if not oas.strip():
        raise DeploymentValidationError("OAS document cannot be empty")


def validate_deployments_request(request: DeploymentsRequest) -> None:
    """
    Validate a new deployment.

    Raises:
        DeploymentValidationError: If the name, team or OAS document is blank
    """
    if not request.name.strip():
        raise DeploymentValidationError("API name cannot be empty")
    if not request.team_id.strip():
        raise DeploymentValidationError("Team id cannot be empty")
    validate_oas(request.oas)


def validate_promotion(request: PromotionRequest) -> None:
    if request.environment_from == request.environment_to:
        raise DeploymentValidationError("Cannot promote an API to the environment it is deployed in")
