"""
Application error handling utilities.

Provides a decorator for consistent error handling across
application-related API endpoints.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from api_hub_applications.api.routers.router_utils.error_mapping import to_http_exception
from api_hub_applications.core.exceptions import ApplicationsException

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handle_application_errors(func: F) -> F:
    """
    Decorator to handle application errors and transform them into HTTPExceptions.

    This centralizes:
    - Logging of errors with context (application_id, environment)
    - Mapping service exceptions to HTTP status codes
    - Ensuring uniform error response formats
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except ApplicationsException as e:
            environment = kwargs.get("environment")
            raise to_http_exception(
                e,
                "Application",
                application_id=kwargs.get("application_id"),
                environment_id=getattr(environment, "id", None),
            ) from e

        except ValueError as e:
            logger.warning("Invalid application request", extra={"error": str(e)})
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

        except Exception as e:
            logger.exception(
                "Unexpected failure in application operation",
                extra={"application_id": kwargs.get("application_id"), "error": str(e)},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An internal error occurred during application operation",
            ) from e

    return wrapper  # type: ignore
