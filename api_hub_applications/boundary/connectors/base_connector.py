"""
Shared plumbing for downstream HTTP connectors.

Builds per-environment headers (Basic auth, proxy API key), propagates the
correlation id and turns transport failures into connector exceptions.

Dependencies: httpx, api_hub_applications.observability
System role: Base class for all outbound HTTP integrations
"""

import base64
import logging
from typing import Any, Callable

import httpx

from api_hub_applications.configs.hip_environments import HipEnvironment
from api_hub_applications.core.exceptions import ApplicationsException
from api_hub_applications.observability.correlation import get_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-Id"
API_KEY_HEADER = "x-api-key"


def basic_auth(client_id: str, secret: str) -> str:
    encoded = base64.b64encode(f"{client_id}:{secret}".encode("utf-8")).decode("ascii")
    return f"Basic {encoded}"


def is_success(response: httpx.Response) -> bool:
    return 200 <= response.status_code < 300


class BaseConnector:
    """
    Base class for connectors sharing one httpx.AsyncClient.

    Attributes:
        client: Async HTTP client owned by the application lifespan
    """

    service_name = "downstream service"

    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    def default_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        correlation_id = get_correlation_id()
        if correlation_id:
            headers[CORRELATION_HEADER] = correlation_id
        return headers

    def environment_headers(self, environment: HipEnvironment) -> dict[str, str]:
        """Headers authenticating against one HIP environment."""
        headers = self.default_headers()
        headers["Authorization"] = basic_auth(environment.client_id, environment.secret)
        if environment.use_proxy and environment.api_key:
            headers[API_KEY_HEADER] = environment.api_key
        return headers

    def context(self, *pairs: tuple[str, Any]) -> list[tuple[str, Any]]:
        """Context for error messages, ending with the correlation id when there is one."""
        context = list(pairs)
        correlation_id = get_correlation_id()
        if correlation_id:
            context.append((CORRELATION_HEADER, correlation_id))
        return context

    async def send(
        self,
        method: str,
        url: str,
        on_error: Callable[[Exception], ApplicationsException],
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Issue a request, converting transport errors.

        Args:
            method: HTTP method
            url: Absolute URL
            on_error: Builds the connector exception for a transport failure
            headers: Request headers, defaults to default_headers()

        Raises:
            ApplicationsException: Built by on_error when the call itself fails
        """
        try:
            return await self.client.request(
                method,
                url,
                headers=headers if headers is not None else self.default_headers(),
                **kwargs,
            )
        except httpx.HTTPError as e:
            logger.warning(
                f"Error calling {self.service_name}",
                extra={"method": method, "url": url, "error": str(e)},
            )
            raise on_error(e) from e
