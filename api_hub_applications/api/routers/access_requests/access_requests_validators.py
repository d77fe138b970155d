"""
Access request validation utilities.

Dependencies: api_hub_applications.models.access_request
System role: Access request validation
"""

from api_hub_applications.configs.hip_environments import HipEnvironments
from api_hub_applications.models.access_request import AccessRequestDecisionRequest, AccessRequestRequest


class AccessRequestValidationError(ValueError):
    """Raised when access request validation fails."""


def validate_access_request_request(request: AccessRequestRequest, hip_environments: HipEnvironments) -> None:
    """
    Validate an access request creation request.

    Raises:
        AccessRequestValidationError: If the supporting information is blank or
            the environment is not configured
    """
    if not request.supporting_information.strip():
        raise AccessRequestValidationError("Supporting information cannot be empty")
    if hip_environments.for_url_path_parameter(request.environment_id) is None:
        raise AccessRequestValidationError(f"Unknown environment: {request.environment_id}")


def validate_rejection(request: AccessRequestDecisionRequest) -> None:
    if not request.rejected_reason or not request.rejected_reason.strip():
        raise AccessRequestValidationError("A rejected reason is required")
