"""
Router utility functions.

Contains helpers shared by router packages to keep endpoints clean.
"""

from api_hub_applications.api.routers.router_utils.error_mapping import status_for, to_http_exception
from api_hub_applications.api.routers.router_utils.responses import json_list_response, json_response

__all__ = [
    "json_list_response",
    "json_response",
    "status_for",
    "to_http_exception",
]
