"""Logging, correlation ids and request middleware."""

from api_hub_applications.observability.correlation import get_correlation_id, set_correlation_id
from api_hub_applications.observability.logger import configure_logging

__all__ = ["configure_logging", "get_correlation_id", "set_correlation_id"]
