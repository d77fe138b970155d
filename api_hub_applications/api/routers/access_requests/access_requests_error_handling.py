"""
Access request error handling utilities.

Provides a decorator for consistent error handling across access request
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


def handle_access_request_errors(func: F) -> F:
    """
    Decorator to handle access request errors and transform them into HTTPExceptions.

    Deciding a request that is no longer PENDING maps to 400.
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except ApplicationsException as e:
            raise to_http_exception(e, "Access request", access_request_id=kwargs.get("access_request_id")) from e

        except ValueError as e:
            logger.warning(
                "Invalid access request",
                extra={"access_request_id": kwargs.get("access_request_id"), "error": str(e)},
            )
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

        except Exception as e:
            logger.exception(
                "Unexpected failure in access request operation",
                extra={"access_request_id": kwargs.get("access_request_id"), "error": str(e)},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An internal error occurred during access request operation",
            ) from e

    return wrapper  # type: ignore
