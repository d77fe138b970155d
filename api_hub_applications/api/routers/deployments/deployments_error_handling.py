"""
Deployment error handling utilities.

Provides a decorator for consistent error handling across deployment
API endpoints.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from api_hub_applications.api.routers.router_utils.error_mapping import to_http_exception
from api_hub_applications.core.exceptions import ApplicationsException

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def handle_deployment_errors(func: F) -> F:
    """
    Decorator to handle deployment errors and transform them into HTTPExceptions.

    APIM and autopublish report an unknown publisher reference as 404.
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except ApplicationsException as e:
            raise to_http_exception(
                e,
                "Deployment",
                publisher_reference=kwargs.get("publisher_reference"),
                api_id=kwargs.get("api_id"),
            ) from e

        except ValueError as e:
            logger.warning("Invalid deployment request", extra={"error": str(e)})
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

        except Exception as e:
            logger.exception(
                "Unexpected failure in deployment operation",
                extra={"publisher_reference": kwargs.get("publisher_reference"), "error": str(e)},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An internal error occurred during deployment operation",
            ) from e

    return wrapper  # type: ignore
